from datetime import datetime, timedelta, UTC
from unittest.mock import MagicMock

import pytest

from linkshortener.dao.memory import LinkMemoryDAO, MemoryDataStore, UserMemoryDAO
from linkshortener.service import LinkService
from linkshortener.utils.config import LinkShortenerConfig


NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def datastore() -> MemoryDataStore:
    """Memory store without persistence."""
    return MemoryDataStore()


@pytest.fixture
def user_dao(datastore) -> UserMemoryDAO:
    return UserMemoryDAO(datastore=datastore)


@pytest.fixture
def link_dao(datastore) -> LinkMemoryDAO:
    return LinkMemoryDAO(datastore=datastore)


@pytest.fixture
def reachability() -> MagicMock:
    """Reachability check answering True unless told otherwise."""
    return MagicMock(return_value=True)


@pytest.fixture
def make_service(user_dao, link_dao, reachability, clock):
    """Build a LinkService on the shared memory store with the given settings."""

    def _make_service(**settings) -> LinkService:
        config = LinkShortenerConfig(**{'base_url': 'https://sho.rt/', **settings})
        return LinkService(user_dao, link_dao, config=config, reachability=reachability, clock=clock)

    return _make_service


@pytest.fixture
def service(make_service) -> LinkService:
    return make_service()


@pytest.fixture
def alice(service):
    return service.authenticate('alice')


@pytest.fixture
def bob(service):
    return service.authenticate('bob')
