import logging

from linkshortener.exceptions import ServiceError
from linkshortener.service.factory import get_link_service
from linkshortener.service.session import Session
from linkshortener.types import LambdaEvent, LambdaContext, LambdaResponse
from linkshortener.utils.helpers import guarantee_500_response
from linkshortener.utils.runtime import get_user_name
from linkshortener.lambdas.responses import (
    parse_json_body,
    response_200,
    response_400,
    response_401,
    response_404,
    response_405,
    response_service_error,
    serialize_link,
)
from linkshortener.lambdas.manage_links.constants import (
    ALLOWED_METHODS,
    MISSING_USER_NAME,
    MISSING_TOKEN,
    INVALID_JSON_BODY,
    NOTHING_TO_EDIT,
    LINK_NOT_FOUND,
    MANAGE_REJECTED,
    LIST_SUCCESS,
    EDIT_SUCCESS,
    DELETE_SUCCESS,
)


logger = logging.getLogger(__name__)


def list_links(session: Session) -> LambdaResponse:
    links = session.list_links()
    logger.info('Listed links. Responding with 200.', extra={'event': LIST_SUCCESS, 'count': len(links)})
    return response_200({'links': [serialize_link(link, session.service.short_url(link.token)) for link in links]})


def edit_link(session: Session, token: str, event: LambdaEvent) -> LambdaResponse:
    body = parse_json_body(event)
    if body is None:
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    changes = {
        'target': body.get('target_url'),
        'duration_text': body.get('duration'),
        'visit_limit': body.get('visit_limit'),
    }
    if all(value is None for value in changes.values()):
        return response_400(message="nothing to edit: provide 'target_url', 'duration' or 'visit_limit'", error_code=NOTHING_TO_EDIT)
    for key, field in (('target', 'target_url'), ('duration_text', 'duration')):
        if changes[key] is not None and not isinstance(changes[key], str):
            return response_400(message=f"'{field}' must be a string", field=field)

    link = session.edit_link(token, **changes)
    logger.info('Edited link. Responding with 200.', extra={'event': EDIT_SUCCESS, 'token': token})
    return response_200({'link': serialize_link(link, session.service.short_url(link.token))})


def delete_link(session: Session, token: str) -> LambdaResponse:
    if not session.delete_link(token):
        logger.info('Nothing to delete. Responding with 404.', extra={'event': LINK_NOT_FOUND, 'token': token})
        return response_404(message=f"link '{token}' doesn't exist", error_code=LINK_NOT_FOUND)

    logger.info('Deleted link. Responding with 200.', extra={'event': DELETE_SUCCESS, 'token': token})
    return response_200({'message': f"Deleted link '{token}'", 'token': token})


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle API Gateway requests managing the caller's links

    Routes:
        GET    /links           list the caller's live links
        PATCH  /links/{token}   edit target_url, duration and/or visit_limit
        DELETE /links/{token}   delete a link

    HTTP responses:
        200: Success
            links: live links (GET)
            link: updated link (PATCH)
            message: deletion message (DELETE)
        400: Bad client request (invalid JSON, nothing to edit, invalid value)
        401: Unauthorized (missing user name)
        403: Forbidden (link owned by another user)
        404: Not found (link doesn't exist or is no longer live)
        405: Method not allowed
        409: Conflict (new duration would expire the link immediately)
        500: Internal server error
    """
    method = (event.get('httpMethod') or '').upper()
    if method not in ALLOWED_METHODS:
        return response_405(allowed=ALLOWED_METHODS)

    user_name = get_user_name(event)
    if not user_name:
        logger.info('Missing user name. Responding with 401.', extra={'event': MISSING_USER_NAME})
        return response_401(message="missing 'username' claim", error_code=MISSING_USER_NAME)

    token = (event.get('pathParameters') or {}).get('token')
    if method != 'GET' and not token:
        return response_400(message="missing 'token' in path", error_code=MISSING_TOKEN)

    try:
        session = get_link_service().authenticate(user_name)
        if method == 'GET':
            return list_links(session)
        if method == 'PATCH':
            return edit_link(session, token, event)
        return delete_link(session, token)
    except ServiceError as e:
        logger.info(
            'Link management request rejected. Responding with error.',
            extra={'event': MANAGE_REJECTED, 'method': method, 'error': e.__class__.__name__, 'field': e.field},
        )
        return response_service_error(e)
