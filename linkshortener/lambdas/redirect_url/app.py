import logging

from linkshortener.exceptions import LinkNotFoundError
from linkshortener.service.factory import get_link_service
from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.lambdas.responses import response_302, response_400, response_404
from linkshortener.lambdas.redirect_url.constants import MISSING_TOKEN, LINK_NOT_FOUND, REDIRECT_SUCCESS


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short links

    This Lambda handler follows this procedure to redirect:
    - Step 1: Extract token from request path
    - Step 2: Resolve the link (consumes one visit of a limited link)
    - Step 3: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing token in path parameters
        404: Not found
            message: link doesn't exist, expired or ran out of visits
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'pathParameters': {'token': 'aB3xY9'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Extract token from request's path
    token = (event.get('pathParameters') or {}).get('token')
    if not token:
        logger.info('Missing "token" in path. Responding with 400.', extra={'event': MISSING_TOKEN})
        return response_400(message="missing 'token' in path", error_code=MISSING_TOKEN)

    # 2- Resolve the link
    service = get_link_service()
    try:
        target_url = service.resolve(token)
    except LinkNotFoundError:
        logger.info('Link not found or no longer live. Responding with 404.', extra={'token': token, 'event': LINK_NOT_FOUND})
        return response_404(message=f"short url {service.short_url(token)} doesn't exist", error_code=LINK_NOT_FOUND)

    # 3- Redirect client to target URL
    logger.info('Redirecting client to target URL. Responding with 302.', extra={'token': token, 'event': REDIRECT_SUCCESS})
    return response_302(location=target_url)
