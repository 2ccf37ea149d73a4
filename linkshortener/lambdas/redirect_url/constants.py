# Response error codes & logging events
MISSING_TOKEN = 'MISSING_TOKEN'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
