"""Memory mixin providing shared data store initialization.

Classes:
    - MemoryStoreMixin: Base mixin to inject a (possibly shared) MemoryDataStore.

Example:
    Typical usage with DAO implementations sharing one store:

        >>> store = MemoryDataStore(snapshot_store=JsonSnapshotStore('user_data.json'))
        >>> users = UserMemoryDAO(datastore=store)
        >>> links = LinkMemoryDAO(datastore=store)
"""

from typing import Optional

from linkshortener.dao.memory.datastore import MemoryDataStore
from linkshortener.dao.snapshot import SnapshotBaseStore


class MemoryStoreMixin:
    """Mixin data store setup for memory-backed DAOs.

    Attributes:
        store (MemoryDataStore):
            Data store used by subclasses. User and link DAOs of one
            service must share the same instance.
    """

    def __init__(
        self,
        datastore: Optional[MemoryDataStore] = None,
        snapshot_store: Optional[SnapshotBaseStore] = None,
    ):
        """Initialize a memory-based DAO

        The option is given to either use an existing data store or create one
        backed by the given snapshot store.

        Args:
            datastore (Optional[MemoryDataStore]):
                Pre-initialized data store. If None, a new one is created.

            snapshot_store (Optional[SnapshotBaseStore]):
                Durable store for a newly created data store. Ignored when
                `datastore` is given.
        """
        if datastore is None:
            datastore = MemoryDataStore(snapshot_store=snapshot_store)

        self.store = datastore
