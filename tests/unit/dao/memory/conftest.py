from unittest.mock import MagicMock

import pytest

from linkshortener.dao.memory import LinkMemoryDAO, MemoryDataStore, UserMemoryDAO
from linkshortener.dao.snapshot import SnapshotBaseStore


@pytest.fixture
def snapshot_store() -> SnapshotBaseStore:
    """Mock snapshot store starting without a snapshot."""
    store = MagicMock(spec=SnapshotBaseStore)
    store.load.return_value = None
    return store


@pytest.fixture
def datastore(snapshot_store) -> MemoryDataStore:
    return MemoryDataStore(snapshot_store=snapshot_store)


@pytest.fixture
def user_dao(datastore) -> UserMemoryDAO:
    return UserMemoryDAO(datastore=datastore)


@pytest.fixture
def link_dao(datastore) -> LinkMemoryDAO:
    return LinkMemoryDAO(datastore=datastore)


@pytest.fixture
def alice(user_dao):
    return user_dao.create('alice')


@pytest.fixture
def bob(user_dao):
    return user_dao.create('bob')
