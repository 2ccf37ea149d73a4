from abc import ABC, abstractmethod

from linkshortener.types import Snapshot


class SnapshotBaseStore(ABC):
    """Interface for durable snapshot stores.

    Methods:
        load() -> Snapshot | None:
            Return the last saved snapshot, or None if nothing was saved yet.
            Raises DataStoreError on read or decode failure.

        save(snapshot: Snapshot) -> None:
            Durably replace the stored snapshot.
            Raises DataStoreError on write failure.
    """

    @abstractmethod
    def load(self) -> Snapshot | None:
        pass

    @abstractmethod
    def save(self, snapshot: Snapshot) -> None:
        pass
