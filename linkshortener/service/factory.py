"""Construction of a fully wired LinkService from configuration

Functions:
    build_link_service(config=None) -> LinkService
        Build a new service on the configured backend.
    get_link_service() -> LinkService
        Process-wide service, built on first use (one per Lambda container).
"""

import functools
import logging
import math

import yaml
from botocore.exceptions import BotoCoreError, ClientError

from linkshortener.constants import Backend, Defaults
from linkshortener.dao.memory import LinkMemoryDAO, MemoryDataStore, UserMemoryDAO
from linkshortener.dao.redis import LinkRedisDAO, UserRedisDAO
from linkshortener.dao.snapshot import JsonSnapshotStore
from linkshortener.exceptions import MissingEnvironmentVariableError
from linkshortener.service.link_service import LinkService
from linkshortener.utils.config import LinkShortenerConfig, app_prefix, build_config, load_config


logger = logging.getLogger(__name__)

REDIS_OPTIONS = frozenset({'host', 'port', 'db', 'decode_responses', 'username', 'password'})


def _redis_kwargs(options: dict) -> dict:
    unknown = sorted(set(options) - REDIS_OPTIONS)
    if unknown:
        logger.warning('Ignoring unknown Redis options.', extra={'keys': unknown})
    return {f'redis_{key}': value for key, value in options.items() if key in REDIS_OPTIONS}


def _load_config() -> LinkShortenerConfig:
    try:
        raw = load_config()
    except (MissingEnvironmentVariableError, OSError, ValueError, yaml.YAMLError, BotoCoreError, ClientError) as e:
        logger.warning('Failed to load configuration. Falling back to defaults.', extra={'error': str(e)})
        raw = None
    # Invalid values are deployment errors, never silently replaced by defaults
    return build_config(raw)


def build_link_service(config: LinkShortenerConfig | None = None) -> LinkService:
    """Build a LinkService on the backend selected by `config.active_backend`

    Args:
        config (LinkShortenerConfig | None):
            Service settings. Loaded via `load_config()` when omitted.

    Returns:
        LinkService: service wired to the selected DAOs. Periodic sweeps are already
        running when `config.sweep_interval` is positive.

    Raises:
        BadConfigurationError:
            If the loaded configuration holds invalid values.
        DataStoreError:
            If the Redis backend is selected and Redis is unreachable.
    """
    if config is None:
        config = _load_config()

    if config.active_backend == Backend.REDIS:
        redis_kwargs = _redis_kwargs(config.redis)
        user_dao = UserRedisDAO(**redis_kwargs, prefix=app_prefix())
        # Share one connection pool between both DAOs
        link_dao = LinkRedisDAO(
            redis_client=user_dao.redis,
            prefix=app_prefix(),
            # Keep expired hashes around for at least one sweep interval
            expiry_grace=max(Defaults.REDIS_EXPIRY_GRACE, math.ceil(config.sweep_interval)),
        )
    else:
        store = MemoryDataStore(snapshot_store=JsonSnapshotStore(config.snapshot_path))
        user_dao = UserMemoryDAO(datastore=store)
        link_dao = LinkMemoryDAO(datastore=store)

    logger.info('Built link service.', extra={'backend': config.active_backend, 'base_url': config.base_url})
    service = LinkService(user_dao, link_dao, config=config)
    if config.sweep_interval > 0:
        service.start_periodic_sweep()
    return service


@functools.cache
def get_link_service() -> LinkService:
    return build_link_service()
