# Response error codes & logging events
MISSING_USER_NAME = 'MISSING_USER_NAME'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
MISSING_DURATION = 'MISSING_DURATION'
SHORTEN_REJECTED = 'SHORTEN_REJECTED'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
