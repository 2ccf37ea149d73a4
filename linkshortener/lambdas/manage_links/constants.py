# Response error codes & logging events
MISSING_USER_NAME = 'MISSING_USER_NAME'
MISSING_TOKEN = 'MISSING_TOKEN'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
NOTHING_TO_EDIT = 'NOTHING_TO_EDIT'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
MANAGE_REJECTED = 'MANAGE_REJECTED'
LIST_SUCCESS = 'LIST_SUCCESS'
EDIT_SUCCESS = 'EDIT_SUCCESS'
DELETE_SUCCESS = 'DELETE_SUCCESS'

ALLOWED_METHODS = ['GET', 'PATCH', 'DELETE']
