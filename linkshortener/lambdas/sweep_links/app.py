import json
import logging
from collections import Counter

from linkshortener.dao.exceptions import DAOError
from linkshortener.models import EvictionNotice
from linkshortener.service.factory import get_link_service
from linkshortener.types import LambdaEvent, LambdaContext
from linkshortener.lambdas.sweep_links.constants import SUCCESS, ERROR


logger = logging.getLogger(__name__)


def response_success(*, notices: list[EvictionNotice]) -> str:
    reasons = Counter(notice.reason.value for notice in notices)
    return json.dumps(
        {
            'status': SUCCESS,
            'evicted': len(notices),
            'reasons': dict(reasons),
            'message': f'Evicted {len(notices)} links',
        }
    )


def response_error(*, error: Exception) -> str:
    return json.dumps(
        {
            'status': ERROR,
            'message': 'Failed to sweep links',
            'reason': str(error),
            'error': error.__class__.__name__,
        }
    )


def lambda_handler(event: LambdaEvent, context: LambdaContext) -> str:
    """Remove every expired or visit-exhausted link (scheduled EventBridge rule).

    Diagnostic responses (NOT valid HTTP responses):
        `success`:
            status: success
            evicted: <number of removed links>
            reasons: {<reason>: <count>}
            message: Evicted <n> links
        `error`:
            status: error
            message: Failed to sweep links
            reason: <reason>
            error: <error class name> (e.g. DataStoreError)
    """
    try:
        notices = get_link_service().sweep()
    except DAOError as error:
        logger.exception(
            'Failed to sweep links.',
            extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return response_error(error=error)
    else:
        logger.info('Swept links.', extra={'event': SUCCESS, 'evicted': len(notices)})
        return response_success(notices=notices)
