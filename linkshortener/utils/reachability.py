"""Destination URL reachability check

A destination is reachable if a HEAD request to it completes within the timeout
and answers with a status in [200, 400). Any failure (DNS, refused connection,
TLS, timeout, 4xx/5xx) counts as unreachable; this check never raises for
network reasons.

Example:
    >>> is_reachable('https://example.com')
    True
    >>> is_reachable('https://does-not-exist.invalid')
    False
"""

import http.client
import logging
import urllib.error
import urllib.parse
import urllib.request

from beartype import beartype

from linkshortener.constants import Defaults


logger = logging.getLogger(__name__)


@beartype
def is_reachable(url: str, timeout: int | float = Defaults.REACHABILITY_TIMEOUT) -> bool:
    """Probe a URL with a HEAD request.

    Args:
        url (str):
            Absolute http(s) URL.
        timeout (int | float):
            Connect/read timeout in seconds. Defaults to 5.

    Returns:
        bool: True iff the response status is in [200, 400).
    """
    components = urllib.parse.urlparse(url)
    if components.scheme not in {'http', 'https'} or not components.netloc:
        logger.info('Rejected URL without http(s) scheme or host.', extra={'url': url})
        return False

    request = urllib.request.Request(url, method='HEAD')
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:  # noqa: S310
            status = response.status
    except urllib.error.HTTPError as e:
        status = e.code
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
        logger.info('URL is unreachable.', extra={'url': url, 'reason': str(e)})
        return False

    logger.debug('URL answered HEAD request.', extra={'url': url, 'status': status})
    return 200 <= status < 400
