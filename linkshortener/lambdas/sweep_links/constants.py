# Diagnostic response statuses & logging events
SUCCESS = 'success'
ERROR = 'error'
