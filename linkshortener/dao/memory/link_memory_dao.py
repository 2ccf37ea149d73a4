"""In-memory implementation of LinkBaseDAO

Every operation holds the data store lock for its whole duration, so each one
is atomic with respect to every other DAO call on the same store. Records are
replaced wholesale, never mutated in place.

Example:
    >>> dao = LinkMemoryDAO(datastore=store)
    >>> dao.insert(alice.user_id, LinkModel(token='aB3xY9', target='https://example.com', visits_left=1))
    <LinkMemoryDAO>
    >>> dao.hit('aB3xY9')
    0
    >>> dao.hit('aB3xY9')
    -1
"""

import dataclasses

from beartype import beartype

from linkshortener.models import LinkModel
from linkshortener.dao.base import LinkBaseDAO, listing_order
from linkshortener.dao.memory.mixins import MemoryStoreMixin
from linkshortener.dao.exceptions import LinkAlreadyExistsError, LinkDoesNotExistError, UserDoesNotExistError


class LinkMemoryDAO(MemoryStoreMixin, LinkBaseDAO):
    """Memory-based Data Access Object (DAO) for managing links

    Attributes (see MemoryStoreMixin):
        store (MemoryDataStore):
            Shared data store holding users and links.
    """

    @beartype
    def find(self, token: str, **kwargs) -> tuple[str, LinkModel] | None:
        with self.store.lock:
            owner_id = self.store.owners.get(token)
            if owner_id is None:
                return None
            return owner_id, self.store.links[owner_id][token]

    @beartype
    def insert(self, owner_id: str, link: LinkModel, **kwargs) -> 'LinkMemoryDAO':
        with self.store.lock:
            if link.token in self.store.owners:
                raise LinkAlreadyExistsError(f"Link with token '{link.token}' already exists.")
            self._store_link(owner_id, link)
        return self

    @beartype
    def put(self, owner_id: str, link: LinkModel, **kwargs) -> 'LinkMemoryDAO':
        with self.store.lock:
            current_owner = self.store.owners.get(link.token)
            if current_owner is not None and current_owner != owner_id:
                raise LinkAlreadyExistsError(f"Link with token '{link.token}' belongs to another user.")
            self._store_link(owner_id, link)
        return self

    @beartype
    def remove(self, owner_id: str, token: str, **kwargs) -> bool:
        with self.store.lock:
            if self.store.owners.get(token) != owner_id:
                return False
            del self.store.links[owner_id][token]
            del self.store.owners[token]
            self.store.commit()
        return True

    @beartype
    def hit(self, token: str, **kwargs) -> int | None:
        """Consume one visit of a link's quota.

        NOTE: Unlike the Redis implementation, an exhausted quota is never
              decremented below 0. -1 is reported without touching the record.
        """
        with self.store.lock:
            found = self.find(token)
            if found is None:
                raise LinkDoesNotExistError(f"Link with token '{token}' not found.")

            owner_id, link = found
            if link.visits_left is None:
                return None
            if link.visits_left <= 0:
                return -1

            leftover = link.visits_left - 1
            self.store.links[owner_id][token] = dataclasses.replace(link, visits_left=leftover)
            self.store.commit()
        return leftover

    @beartype
    def links_of(self, owner_id: str, **kwargs) -> list[LinkModel]:
        with self.store.lock:
            links = list(self.store.links.get(owner_id, {}).values())
        return sorted(links, key=listing_order)

    def all_links(self, **kwargs) -> list[tuple[str, LinkModel]]:
        with self.store.lock:
            return [(owner_id, link) for owner_id, links in self.store.links.items() for link in links.values()]

    def _store_link(self, owner_id: str, link: LinkModel) -> None:
        """Write a link and persist. Caller must hold the store lock."""
        if owner_id not in self.store.links:
            raise UserDoesNotExistError(f"User with ID '{owner_id}' does not exist.")
        self.store.links[owner_id][link.token] = link
        self.store.owners[link.token] = owner_id
        self.store.commit()
