import logging

from linkshortener.exceptions import ServiceError
from linkshortener.service.factory import get_link_service
from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.utils.helpers import guarantee_500_response, token_from_short_url
from linkshortener.utils.runtime import get_user_name
from linkshortener.lambdas.responses import (
    parse_json_body,
    response_200,
    response_400,
    response_401,
    response_service_error,
)
from linkshortener.lambdas.shorten_url.constants import (
    MISSING_USER_NAME,
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    MISSING_DURATION,
    SHORTEN_REJECTED,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract the caller's user name
    - Step 2: Extract target URL, duration and visit limit from request body
    - Step 3: Authenticate the user (registering new users)
    - Step 4: Create the link
    - Step 5: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            message: success message
            target_url: original url (provided in request)
            short_url: newly generated short url
            token: newly generated token
        400: Bad client request
            message: cause of bad request (invalid JSON, missing field, invalid value)
            errorCode: machine readable cause
            field: request field which failed validation (if any)
        401: Unauthorized
            message: indicate missing user name
        503: Service unavailable
            message: no unique token could be generated
        500: Internal server error
            message: indicate the server experienced an internal error

    Example:
        >>> event = {'body': '{"target_url": "https://example.com", "duration": "1h", "visit_limit": 2}', ...}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['short_url']
        'https://sho.rt/aB3xY9'
    """
    # 1- Extract user name
    user_name = get_user_name(event)
    if not user_name:
        logger.info('Missing user name. Responding with 401.', extra={'event': MISSING_USER_NAME})
        return response_401(message="missing 'username' claim", error_code=MISSING_USER_NAME)

    # 2- Extract link parameters from request body
    body = parse_json_body(event)
    if body is None:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    target_url = body.get('target_url')
    if not isinstance(target_url, str) or not target_url.strip():
        return response_400(message="missing 'target_url' in JSON body", error_code=MISSING_TARGET_URL, field='target_url')

    duration = body.get('duration')
    if not isinstance(duration, str) or not duration.strip():
        return response_400(message="missing 'duration' in JSON body", error_code=MISSING_DURATION, field='duration')

    visit_limit = body.get('visit_limit')

    # 3- Authenticate user & 4- create the link
    service = get_link_service()
    try:
        session = service.authenticate(user_name)
        short_url = session.create_link(target_url, duration, visit_limit)
    except ServiceError as e:
        logger.info(
            'Link creation rejected. Responding with error.',
            extra={'event': SHORTEN_REJECTED, 'error': e.__class__.__name__, 'field': e.field},
        )
        return response_service_error(e)

    # 5- Return successful response to user
    token = token_from_short_url(short_url, service.config.base_url)
    logger.info('Shortened URL. Responding with 200.', extra={'event': SHORTEN_SUCCESS, 'token': token})
    return response_200(
        {
            'message': f'Successfully shortened {target_url} to {short_url}',
            'target_url': target_url,
            'short_url': short_url,
            'token': token,
        }
    )
