"""Unit tests for LinkService construction in factory.py

Test coverage includes:

1. Backend selection
   - Ensures the memory backend shares one store between both DAOs.
   - Ensures the Redis backend shares one client between both DAOs.
   - Ensures Redis keeps expired hashes for at least one sweep interval.
   - Ensures periodic sweeps start when a sweep interval is configured.

2. Configuration loading
   - Ensures unavailable configuration falls back to defaults.
   - Ensures invalid configuration values propagate.

3. Process-wide service
   - Ensures get_link_service() builds the service once.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from linkshortener.constants import Backend, Defaults
from linkshortener.dao.memory import LinkMemoryDAO, UserMemoryDAO
from linkshortener.dao.snapshot import JsonSnapshotStore
from linkshortener.exceptions import BadConfigurationError, MissingEnvironmentVariableError
from linkshortener.service import LinkService
from linkshortener.service import factory
from linkshortener.utils.config import LinkShortenerConfig


# -------------------------------
# 1. Backend selection
# -------------------------------


def test_build_memory_service(tmp_path):
    """1.1. The memory backend persists to the configured snapshot file"""
    path = tmp_path / 'user_data.json'
    config = LinkShortenerConfig(snapshot_path=str(path), check_reachability=False)

    service = factory.build_link_service(config)

    assert isinstance(service, LinkService)
    assert isinstance(service.user_dao, UserMemoryDAO)
    assert isinstance(service.link_dao, LinkMemoryDAO)
    assert service.user_dao.store is service.link_dao.store
    assert isinstance(service.link_dao.store.snapshot_store, JsonSnapshotStore)
    assert service.config is config

    service.authenticate('alice').create_link('https://example.com', '1h')
    assert path.exists()


def test_build_redis_service(monkeypatch):
    """1.2. The Redis backend passes known options and shares one client"""
    monkeypatch.setenv('APP_NAME', 'linkshortener')
    monkeypatch.setenv('APP_ENV', 'test')
    user_dao_cls, link_dao_cls = MagicMock(), MagicMock()
    monkeypatch.setattr(factory, 'UserRedisDAO', user_dao_cls)
    monkeypatch.setattr(factory, 'LinkRedisDAO', link_dao_cls)
    config = LinkShortenerConfig(active_backend=Backend.REDIS, redis={'host': 'redis.test', 'port': 6380, 'ssl': True})

    service = factory.build_link_service(config)

    user_dao_cls.assert_called_once_with(redis_host='redis.test', redis_port=6380, prefix='linkshortener:test')
    link_dao_cls.assert_called_once_with(
        redis_client=user_dao_cls.return_value.redis,
        prefix='linkshortener:test',
        expiry_grace=Defaults.REDIS_EXPIRY_GRACE,
    )
    assert service.user_dao is user_dao_cls.return_value
    assert service.link_dao is link_dao_cls.return_value


@pytest.mark.parametrize(
    'sweep_interval, expiry_grace',
    [
        (0, Defaults.REDIS_EXPIRY_GRACE),
        (60, Defaults.REDIS_EXPIRY_GRACE),
        (7200.5, 7201),
    ],
)
def test_redis_expiry_grace_covers_sweep_interval(monkeypatch, sweep_interval, expiry_grace):
    """1.3. Expired Redis hashes outlive at least one sweep interval"""
    monkeypatch.setenv('APP_NAME', 'linkshortener')
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.setattr(factory, 'UserRedisDAO', MagicMock())
    link_dao_cls = MagicMock()
    monkeypatch.setattr(factory, 'LinkRedisDAO', link_dao_cls)
    monkeypatch.setattr(LinkService, 'start_periodic_sweep', MagicMock())
    config = LinkShortenerConfig(active_backend=Backend.REDIS, sweep_interval=sweep_interval)

    factory.build_link_service(config)

    assert link_dao_cls.call_args.kwargs['expiry_grace'] == expiry_grace


def test_build_starts_periodic_sweep(tmp_path):
    """1.4. A positive sweep interval starts background sweeps"""
    config = LinkShortenerConfig(snapshot_path=str(tmp_path / 'user_data.json'), sweep_interval=60)

    service = factory.build_link_service(config)
    try:
        assert service._sweeper is not None
        assert service._sweeper.running
        assert service._sweeper.interval == 60
    finally:
        service.stop_periodic_sweep()


def test_build_without_periodic_sweep(tmp_path):
    """1.5. A zero sweep interval leaves sweeping to explicit triggers"""
    config = LinkShortenerConfig(snapshot_path=str(tmp_path / 'user_data.json'))

    service = factory.build_link_service(config)

    assert service._sweeper is None


# -------------------------------
# 2. Configuration loading
# -------------------------------


@pytest.mark.parametrize('error', [MissingEnvironmentVariableError('APPCONFIG_APP_ID'), FileNotFoundError('config.yaml')])
def test_config_fallback(monkeypatch, error, caplog):
    """2.1. Unavailable configuration falls back to defaults"""
    monkeypatch.setattr(factory, 'load_config', MagicMock(side_effect=error))

    assert factory._load_config() == LinkShortenerConfig()
    assert 'Falling back to defaults' in caplog.text


def test_config_loaded(monkeypatch):
    """2.2. Loaded configuration is validated"""
    monkeypatch.setattr(factory, 'load_config', lambda: {'max_expiry_duration': '12h', 'default_visit_floor': 3})

    config = factory._load_config()

    assert config.max_expiry_duration == timedelta(hours=12)
    assert config.default_visit_floor == 3


def test_config_invalid(monkeypatch):
    """2.3. Invalid values are never replaced by defaults"""
    monkeypatch.setattr(factory, 'load_config', lambda: {'active_backend': 'postgres'})

    with pytest.raises(BadConfigurationError):
        factory.build_link_service()


# -------------------------------
# 3. Process-wide service
# -------------------------------


def test_get_link_service_is_cached(monkeypatch):
    """3.1. The service is built once per process"""
    build = MagicMock()
    monkeypatch.setattr(factory, 'build_link_service', build)
    factory.get_link_service.cache_clear()
    try:
        assert factory.get_link_service() is factory.get_link_service()
        build.assert_called_once_with()
    finally:
        factory.get_link_service.cache_clear()
