"""Data Access Object (DAO) implementation for managing links in Redis

This module provides a Redis-based implementation of LinkBaseDAO.

Key layout (see RedisKeySchema):
    <prefix>:links:<token>              -> hash {owner, target, expires_at, visits_left}
    <prefix>:links:index                -> set of every token
    <prefix>:users:<user_id>:links      -> set of the user's tokens

Every check-then-write on a link hash (insert, put, remove, hit) runs as an
optimistic WATCH/MULTI transaction on the hash key and is retried when another
client touches the key in between, so concurrent processes never act on a stale
read.

Link hashes are given an EXPIREAT of the link's expiry plus `expiry_grace`
seconds, so Redis eventually drops expired links that no sweep removed. Index
entries left behind by such expirations are pruned whenever they are read.

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> dao = LinkRedisDAO(prefix="app:dev")
    >>> dao.insert(owner_id, LinkModel(token='aB3xY9', target='https://example.com', visits_left=2))
    <LinkRedisDAO>
    >>> dao.hit('aB3xY9')
    1
"""

import math
from collections.abc import Callable
from datetime import datetime, UTC

import redis
from beartype import beartype

from linkshortener.constants import Defaults
from linkshortener.models import LinkModel
from linkshortener.dao.base import LinkBaseDAO, listing_order
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error
from linkshortener.dao.exceptions import LinkAlreadyExistsError, LinkDoesNotExistError


def _link_to_hash(owner_id: str, link: LinkModel) -> dict[str, str | int]:
    mapping = {'owner': owner_id, 'target': link.target}
    if link.expires_at is not None:
        mapping['expires_at'] = link.expires_at.isoformat()
    if link.visits_left is not None:
        mapping['visits_left'] = link.visits_left
    return mapping


def _link_from_hash(token: str, data: dict[str, str]) -> tuple[str, LinkModel] | None:
    if not data or 'owner' not in data or 'target' not in data:
        return None

    expires_at = None
    if data.get('expires_at'):
        expires_at = datetime.fromisoformat(data['expires_at'])
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)

    # HINCRBY may leave a spent quota below 0 (see LinkRedisDAO.hit)
    visits_left = max(int(data['visits_left']), 0) if data.get('visits_left') is not None else None

    return data['owner'], LinkModel(token=token, target=data['target'], expires_at=expires_at, visits_left=visits_left)


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing links

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.
        expiry_grace (int):
            Seconds a link hash is kept past the link's expiry.
    """

    def __init__(self, *args, expiry_grace: int = Defaults.REDIS_EXPIRY_GRACE, **kwargs):
        if expiry_grace < 0:
            raise ValueError(f'Expiry grace must not be negative (given: {expiry_grace}).')
        super().__init__(*args, **kwargs)
        self.expiry_grace = expiry_grace

    @handle_redis_connection_error
    @beartype
    def find(self, token: str, **kwargs) -> tuple[str, LinkModel] | None:
        return _link_from_hash(token, self.redis.hgetall(self.keys.link_key(token)))

    @handle_redis_connection_error
    @beartype
    def insert(self, owner_id: str, link: LinkModel, **kwargs) -> 'LinkRedisDAO':
        """Insert a link into Redis

        The token is claimed in a WATCH/MULTI transaction: if another client
        writes the token first, the existence check is repeated and fails.
        A leftover hash without an owner does not count as an existing link.

        Raises:
            LinkAlreadyExistsError:
                If a link with the same token already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """

        def claim(pipe: redis.client.Pipeline) -> None:
            if pipe.hexists(link_key, 'owner'):
                raise LinkAlreadyExistsError(f"Link with token '{link.token}' already exists.")
            pipe.multi()
            self._queue_write(pipe, owner_id, link)
            pipe.execute()

        link_key = self.keys.link_key(link.token)
        self._watched(link_key, claim)
        return self

    @handle_redis_connection_error
    @beartype
    def put(self, owner_id: str, link: LinkModel, **kwargs) -> 'LinkRedisDAO':
        def replace(pipe: redis.client.Pipeline) -> None:
            current_owner = pipe.hget(link_key, 'owner')
            if current_owner is not None and current_owner != owner_id:
                raise LinkAlreadyExistsError(f"Link with token '{link.token}' belongs to another user.")
            pipe.multi()
            self._queue_write(pipe, owner_id, link)
            pipe.execute()

        link_key = self.keys.link_key(link.token)
        self._watched(link_key, replace)
        return self

    @handle_redis_connection_error
    @beartype
    def remove(self, owner_id: str, token: str, **kwargs) -> bool:
        def delete(pipe: redis.client.Pipeline) -> bool:
            if pipe.hget(link_key, 'owner') != owner_id:
                return False
            pipe.multi()
            pipe.delete(link_key)
            pipe.srem(self.keys.links_index_key(), token)
            pipe.srem(self.keys.user_links_key(owner_id), token)
            pipe.execute()
            return True

        link_key = self.keys.link_key(token)
        return self._watched(link_key, delete)

    @handle_redis_connection_error
    @beartype
    def hit(self, token: str, **kwargs) -> int | None:
        """Consume one visit of a link's quota.

        NOTE: The decrement only commits if the link hash was left untouched
              since it was checked. A hash removed in between is re-checked
              and reported as missing instead of being recreated by HINCRBY.
              Two hits racing on a link with 1 visit left return 0 and -1:
              exactly one of them gets the last visit. The stored counter may
              therefore drop below 0; readers clamp it.

        Raises:
            LinkDoesNotExistError:
                If no link with the given token exists.
            DataStoreError:
                If Redis connectivity issues occur.
        """

        def consume(pipe: redis.client.Pipeline) -> int | None:
            if not pipe.hexists(link_key, 'owner'):
                raise LinkDoesNotExistError(f"Link with token '{token}' not found.")
            if not pipe.hexists(link_key, 'visits_left'):
                return None
            pipe.multi()
            pipe.hincrby(link_key, 'visits_left', -1)
            (visits_left,) = pipe.execute()
            return visits_left

        link_key = self.keys.link_key(token)
        return self._watched(link_key, consume)

    @handle_redis_connection_error
    @beartype
    def links_of(self, owner_id: str, **kwargs) -> list[LinkModel]:
        user_links_key = self.keys.user_links_key(owner_id)
        found = self._fetch(user_links_key, self.redis.smembers(user_links_key))
        return sorted((link for owner, link in found if owner == owner_id), key=listing_order)

    @handle_redis_connection_error
    def all_links(self, **kwargs) -> list[tuple[str, LinkModel]]:
        links_index_key = self.keys.links_index_key()
        return self._fetch(links_index_key, self.redis.smembers(links_index_key))

    def _watched[T](self, link_key: str, transaction: Callable[[redis.client.Pipeline], T]) -> T:
        """Run `transaction` with `link_key` WATCHed, retrying whenever the key changes before EXEC.

        `transaction` reads in immediate mode, then calls `pipe.multi()` and
        queues its writes. Exceptions it raises end the attempt without writing.
        """
        with self.redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    pipe.watch(link_key)
                    return transaction(pipe)
                except redis.exceptions.WatchError:
                    continue

    def _queue_write(self, pipe: redis.client.Pipeline, owner_id: str, link: LinkModel) -> None:
        """Queue a whole link record, its expiry and index entries on a MULTI pipeline.

        Any previous hash under the token is replaced, fields included.
        """
        link_key = self.keys.link_key(link.token)
        pipe.delete(link_key)
        pipe.hset(link_key, mapping=_link_to_hash(owner_id, link))
        if link.expires_at is not None:
            pipe.expireat(link_key, math.ceil(link.expires_at.timestamp()) + self.expiry_grace)
        pipe.sadd(self.keys.links_index_key(), link.token)
        pipe.sadd(self.keys.user_links_key(owner_id), link.token)

    def _fetch(self, set_key: str, tokens) -> list[tuple[str, LinkModel]]:
        """Load the links of `tokens` and prune tokens without a link hash from `set_key`."""
        tokens = sorted(tokens)
        if not tokens:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for token in tokens:
                pipe.hgetall(self.keys.link_key(token))
            results = pipe.execute()

        found = []
        stale = []
        for token, data in zip(tokens, results):
            entry = _link_from_hash(token, data)
            if entry is None:
                stale.append(token)
            else:
                found.append(entry)

        if stale:
            self.redis.srem(set_key, *stale)
        return found
