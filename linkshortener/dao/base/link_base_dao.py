"""Abstract base class for link data access objects (DAOs).

This class establishes a consistent contract for all link DAO implementations,
regardless of the underlying storage mechanism (e.g., in-memory, Redis).

Responsibilities:
    - Own the owner -> token -> LinkModel mapping; nothing else mutates it.
    - Guarantee global token uniqueness on insert.
    - Enforce ownership on removal.
    - Consume visit quotas atomically.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkshortener.models import LinkModel
        >>> from linkshortener.dao.memory import LinkMemoryDAO

        >>> dao = LinkMemoryDAO(...)
        >>> dao.insert('6f1c...', LinkModel(token='aB3xY9', target='https://example.com', visits_left=2))

        >>> owner_id, link = dao.find('aB3xY9')
        >>> link.target
        'https://example.com'

        >>> dao.hit('aB3xY9')
        1
"""

from abc import ABC, abstractmethod

from linkshortener.models import LinkModel


def listing_order(link: LinkModel) -> tuple[str, str]:
    """Sort key for displaying links: destination ascending, then token ascending."""
    return link.target, link.token


class LinkBaseDAO(ABC):
    """Interface for link data access objects (DAOs).

    Methods:
        find(token: str) -> tuple[str, LinkModel] | None:
            Look a token up across all owners.

        insert(owner_id: str, link: LinkModel) -> LinkBaseDAO:
            Insert a new link. Raises LinkAlreadyExistsError if the token is taken.

        put(owner_id: str, link: LinkModel) -> LinkBaseDAO:
            Insert or overwrite a link of the given owner.

        remove(owner_id: str, token: str) -> bool:
            Remove a link if it exists and belongs to the owner.

        hit(token: str) -> int | None:
            Consume one visit of a link's quota.

        links_of(owner_id: str) -> list[LinkModel]:
            Links of one owner in listing order.

        all_links() -> list[tuple[str, LinkModel]]:
            Point-in-time copy of every (owner_id, link) pair.

    Subclassing:
        Datastore-specific implementations (e.g., LinkMemoryDAO or
        LinkRedisDAO) must extend this class and implement all
        abstract methods. Every mutation must be durable once it returns.

    NOTE:
        - DAOs never evaluate liveness. Expired or exhausted links stay
          visible until the eviction engine removes them.
    """

    @abstractmethod
    def find(self, token: str, **kwargs) -> tuple[str, LinkModel] | None:
        """Look up a link by token across all owners.

        Args:
            token (str):
                The token of the link.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            tuple[str, LinkModel] | None: (owner_id, link) if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def insert(self, owner_id: str, link: LinkModel, **kwargs) -> 'LinkBaseDAO':
        """Insert a new link.

        The uniqueness check and the insert happen atomically.

        Args:
            owner_id (str):
                The owning user's identifier.

            link (LinkModel):
                The link to insert.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkBaseDAO: self (for method chaining)

        Raises:
            LinkAlreadyExistsError:
                If any owner already has a link with the same token.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def put(self, owner_id: str, link: LinkModel, **kwargs) -> 'LinkBaseDAO':
        """Insert or overwrite a link as a whole record.

        Args:
            owner_id (str):
                The owning user's identifier.

            link (LinkModel):
                The replacement record.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkBaseDAO: self (for method chaining)

        Raises:
            LinkAlreadyExistsError:
                If the token belongs to a different owner.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def remove(self, owner_id: str, token: str, **kwargs) -> bool:
        """Remove a link owned by `owner_id`.

        Returns:
            bool: True iff the link existed and belonged to the owner.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hit(self, token: str, **kwargs) -> int | None:
        """Consume one visit of a link's quota.

        Returns:
            int | None:
                Leftover visits after the hit. A negative value means the quota
                was already spent and the visit must be refused.
                None if the link has no visit quota.

        Raises:
            LinkDoesNotExistError:
                If no link with the given token exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def links_of(self, owner_id: str, **kwargs) -> list[LinkModel]:
        """Return the links of one owner ordered by destination, then token."""
        pass

    @abstractmethod
    def all_links(self, **kwargs) -> list[tuple[str, LinkModel]]:
        """Return a point-in-time copy of every (owner_id, link) pair."""
        pass
