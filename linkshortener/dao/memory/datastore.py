"""Process-local data store backing the in-memory DAOs.

Responsibilities:
    - Hold users and links in plain dictionaries guarded by one re-entrant lock.
    - Load the initial state from a snapshot store.
    - Write the full mapping through to the snapshot store after every mutation.

Persistence failures never abort an operation: a failed load starts with an
empty store, and a failed save keeps the in-memory change. Both are logged.

Example:
    >>> from linkshortener.dao.snapshot import JsonSnapshotStore
    >>> store = MemoryDataStore(snapshot_store=JsonSnapshotStore('user_data.json'))
    >>> with store.lock:
    ...     store.users
    {}
"""

import logging
import threading

from linkshortener.dao.exceptions import DAOError
from linkshortener.dao.snapshot import SnapshotBaseStore, dump_snapshot, load_snapshot
from linkshortener.models import LinkModel, UserModel


logger = logging.getLogger(__name__)


class MemoryDataStore:
    """Shared state of UserMemoryDAO and LinkMemoryDAO.

    Attributes:
        lock (threading.RLock):
            Guards every attribute below. Hold it for any read-modify-write.
        users (dict[str, UserModel]):
            name -> user.
        links (dict[str, dict[str, LinkModel]]):
            owner_id -> token -> link. Every user has an entry.
        owners (dict[str, str]):
            token -> owner_id index for global token lookups.
        snapshot_store (SnapshotBaseStore | None):
            Durable store written after every commit. None disables persistence.
    """

    def __init__(self, snapshot_store: SnapshotBaseStore | None = None):
        self.lock = threading.RLock()
        self.users: dict[str, UserModel] = {}
        self.links: dict[str, dict[str, LinkModel]] = {}
        self.owners: dict[str, str] = {}
        self.snapshot_store = snapshot_store

        self.load()

    def load(self) -> None:
        """Replace the in-memory state with the content of the snapshot store."""
        if self.snapshot_store is None:
            return

        try:
            snapshot = self.snapshot_store.load()
            users, links = load_snapshot(snapshot) if snapshot is not None else ([], {})
        except DAOError:
            logger.exception('Failed to load snapshot. Starting with an empty store.')
            users, links = [], {}
        else:
            if snapshot is None:
                logger.info('No snapshot found. Starting with an empty store.')

        with self.lock:
            self.users = {user.name: user for user in users}
            self.links = {user.user_id: {} for user in users}
            self.owners = {}
            for owner_id, owner_links in links.items():
                for link in owner_links:
                    if link.token in self.owners:
                        logger.warning('Skipping duplicate token found in snapshot.', extra={'token': link.token, 'owner_id': owner_id})
                        continue
                    self.links[owner_id][link.token] = link
                    self.owners[link.token] = owner_id

        logger.info('Loaded snapshot.', extra={'users': len(self.users), 'links': len(self.owners)})

    def commit(self) -> None:
        """Write the full mapping through to the snapshot store.

        NOTE: The snapshot is taken and saved while holding the lock, so saves
              land in commit order and an older snapshot never overwrites a newer one.
        """
        if self.snapshot_store is None:
            return

        with self.lock:
            snapshot = dump_snapshot(self.users.values(), self.links)
            try:
                self.snapshot_store.save(snapshot)
            except DAOError:
                logger.exception('Failed to save snapshot. In-memory changes are kept.')
