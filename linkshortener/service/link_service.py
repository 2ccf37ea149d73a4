"""Link lifecycle service

Coordinates creating, resolving, editing, deleting and listing short links on
top of a user DAO and a link DAO. Every operation validates its whole input
before touching the store, so a rejected request never leaves partial state.

Concurrency:
    Each read-modify-write on a link (token uniqueness check + insert, liveness
    check + quota decrement, edit commit, eviction) runs under the token's lock
    from a shared TokenLocks registry. The DAOs replace whole records, so
    concurrent readers never see a half-updated link.

Example:
    >>> service = LinkService(UserMemoryDAO(datastore=store), LinkMemoryDAO(datastore=store))
    >>> session = service.authenticate('alice')
    >>> short_url = session.create_link('https://example.com', '1h', visit_limit=2)
    >>> service.resolve(short_url)
    'https://example.com'
"""

import dataclasses
import functools
import logging
from datetime import timedelta

from linkshortener.constants import Defaults
from linkshortener.dao.base import LinkBaseDAO, UserBaseDAO
from linkshortener.dao.exceptions import LinkAlreadyExistsError, LinkDoesNotExistError, UserAlreadyExistsError
from linkshortener.exceptions import (
    AlreadyExpiredError,
    InvalidDurationError,
    InvalidNameError,
    InvalidVisitLimitError,
    InvariantViolationError,
    LinkNotFoundError,
    LinkNotOwnedError,
    TokenGenerationError,
    UnreachableURLError,
)
from linkshortener.models import EvictionNotice, LinkModel, UserModel
from linkshortener.service.eviction_engine import EvictionEngine, PeriodicSweeper, is_live
from linkshortener.service.locks import TokenLocks
from linkshortener.service.session import Session
from linkshortener.types import Clock, ReachabilityCheck
from linkshortener.utils.config import LinkShortenerConfig
from linkshortener.utils.durations import parse_duration
from linkshortener.utils.helpers import get_short_url, token_from_short_url, utcnow
from linkshortener.utils.reachability import is_reachable
from linkshortener.utils.shortener import generate_token


logger = logging.getLogger(__name__)


def _always_reachable(url: str) -> bool:
    return True


class LinkService:
    """Façade of the link lifecycle.

    Attributes:
        user_dao (UserBaseDAO):
            Store of users.
        link_dao (LinkBaseDAO):
            Store of links.
        config (LinkShortenerConfig):
            Validated service settings.
        reachability (ReachabilityCheck):
            Destination URL check run on create and on edits changing the target.
        clock (Clock):
            Source of the current time.
        locks (TokenLocks):
            Per-token locks, shared with the eviction engine.
        eviction (EvictionEngine):
            Engine removing dead links.
    """

    def __init__(
        self,
        user_dao: UserBaseDAO,
        link_dao: LinkBaseDAO,
        config: LinkShortenerConfig | None = None,
        reachability: ReachabilityCheck | None = None,
        clock: Clock = utcnow,
        locks: TokenLocks | None = None,
        eviction: EvictionEngine | None = None,
    ):
        self.user_dao = user_dao
        self.link_dao = link_dao
        self.config = config if config is not None else LinkShortenerConfig()
        self.clock = clock
        self.locks = locks if locks is not None else TokenLocks()

        if reachability is None:
            if self.config.check_reachability:
                reachability = functools.partial(is_reachable, timeout=self.config.reachability_timeout)
            else:
                reachability = _always_reachable
        self.reachability = reachability

        if eviction is None:
            eviction = EvictionEngine(link_dao, locks=self.locks, clock=clock)
        self.eviction = eviction

        self._sweeper: PeriodicSweeper | None = None

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def authenticate(self, name: str) -> Session:
        """Resume the session of an existing user or register a new one.

        Args:
            name (str):
                User name. Surrounding whitespace is ignored; the rest must be
                letters only.

        Returns:
            Session: the user's session.

        Raises:
            InvalidNameError:
                If the name is empty or contains anything but letters.
        """
        name = name.strip() if isinstance(name, str) else ''
        if not name or not name.isalpha():
            raise InvalidNameError('User name must be non-empty and contain letters only.')

        user = self.user_dao.get_by_name(name)
        if user is None:
            try:
                user = self.user_dao.create(name)
                logger.info('Registered new user.', extra={'user_name': name, 'user_id': user.user_id})
            except UserAlreadyExistsError:
                # Registered concurrently by another request
                user = self.user_dao.get_by_name(name)

        if user is None:
            raise InvariantViolationError(f"User '{name}' vanished right after registration.")
        return Session(self, user)

    def user(self, user_id: str) -> UserModel:
        """Return an authenticated user, raising InvariantViolationError if it is gone."""
        user = self.user_dao.get(user_id)
        if user is None:
            raise InvariantViolationError(f"Authenticated user '{user_id}' not found in the user store.")
        return user

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def create_link(self, owner_id: str, target: str, duration_text: str, visit_limit: int | None = None) -> str:
        """Create a short link.

        Args:
            owner_id (str):
                ID of the owning user.
            target (str):
                Destination URL. Must pass the reachability check.
            duration_text (str):
                Lifetime such as "1d 2h 30m". Clamped to `max_expiry_duration`.
            visit_limit (int | None):
                Maximum number of redirects, raised to `default_visit_floor` if
                lower. None means unlimited.

        Returns:
            str: the short URL (`base_url` + token).

        Raises:
            InvalidDurationError:
                If the duration text yields no positive duration.
            InvalidVisitLimitError:
                If the visit limit is not an integer.
            UnreachableURLError:
                If the destination URL fails the reachability check.
            TokenGenerationError:
                If every generated token collided with an existing one.
        """
        self.user(owner_id)

        lifetime = self._lifetime(duration_text)
        if lifetime <= timedelta(0):
            raise InvalidDurationError(f"Duration '{duration_text}' must be positive.")
        visits_left = self._visit_quota(visit_limit)
        target = self._reachable_target(target)

        for attempt in range(1, Defaults.TOKEN_GENERATION_ATTEMPTS + 1):
            token = generate_token(self.config.token_length, self.config.token_salt)
            link = LinkModel(token=token, target=target, expires_at=self.clock() + lifetime, visits_left=visits_left)

            with self.locks.lock(token):
                try:
                    self.link_dao.insert(owner_id, link)
                except LinkAlreadyExistsError:
                    logger.info('Token collision. Generating a new token.', extra={'token': token, 'attempt': attempt})
                    continue

            logger.info(
                'Created link.',
                extra={
                    'event': 'create',
                    'token': token,
                    'owner_id': owner_id,
                    'expires_at': link.expires_at,
                    'visits_left': visits_left,
                },
            )
            return self.short_url(token)

        raise TokenGenerationError(f'Failed to generate a unique token in {Defaults.TOKEN_GENERATION_ATTEMPTS} attempts.')

    def resolve(self, token: str) -> str:
        """Return the destination of a live link, consuming one visit of its quota.

        Args:
            token (str):
                Bare token or full short URL.

        Returns:
            str: the destination URL.

        Raises:
            LinkNotFoundError:
                If the link is absent, expired or out of visits.
        """
        token = token_from_short_url(token, self.config.base_url)
        if not token:
            raise LinkNotFoundError('No token given.')

        if self.config.eager_sweep:
            self.eviction.sweep()

        with self.locks.lock(token):
            found = self.link_dao.find(token)
            if found is None:
                raise LinkNotFoundError(f"Link '{token}' not found.")

            _, link = found
            now = self.clock()
            if not is_live(link, now):
                self.eviction.evict(token, now=now)
                raise LinkNotFoundError(f"Link '{token}' not found.")

            if link.visits_left is not None:
                try:
                    leftover = self.link_dao.hit(token)
                except LinkDoesNotExistError as e:
                    raise LinkNotFoundError(f"Link '{token}' not found.") from e

                # Spent by a concurrent visit (possibly in another process)
                if leftover is not None and leftover < 0:
                    raise LinkNotFoundError(f"Link '{token}' not found.")
            else:
                leftover = None

        logger.info('Resolved link.', extra={'event': 'redirect', 'token': token, 'visits_left': leftover})
        return link.target

    def edit_link(
        self,
        owner_id: str,
        token: str,
        target: str | None = None,
        duration_text: str | None = None,
        visit_limit: int | None = None,
    ) -> LinkModel:
        """Replace any of a link's destination, expiry and visit limit.

        Omitted (None) fields keep their current value. A new duration counts
        from now. All fields are validated first and committed together, or
        nothing changes.

        Returns:
            LinkModel: the updated link.

        Raises:
            LinkNotFoundError:
                If the link is absent or no longer live.
            LinkNotOwnedError:
                If the link belongs to another user.
            InvalidDurationError:
                If a new duration text contains no valid duration token.
            AlreadyExpiredError:
                If the new expiry is not strictly in the future.
            InvalidVisitLimitError:
                If the new visit limit is not an integer.
            UnreachableURLError:
                If a new destination URL fails the reachability check.
        """
        self.user(owner_id)
        token = token_from_short_url(token, self.config.base_url)

        if self.config.eager_sweep:
            self.eviction.sweep()

        current = self._owned_link(owner_id, token)

        now = self.clock()
        changes = {}
        if duration_text is not None:
            expires_at = now + self._lifetime(duration_text)
            if expires_at <= now:
                raise AlreadyExpiredError(f"Duration '{duration_text}' would expire the link immediately.")
            changes['expires_at'] = expires_at
        if visit_limit is not None:
            changes['visits_left'] = self._visit_quota(visit_limit)
        if target is not None and target.strip() != current.target:
            changes['target'] = self._reachable_target(target)

        with self.locks.lock(token):
            # Re-read: the link may have changed while the destination was probed
            current = self._owned_link(owner_id, token)
            updated = dataclasses.replace(current, **changes)
            self.link_dao.put(owner_id, updated)

        logger.info('Edited link.', extra={'event': 'edit', 'token': token, 'owner_id': owner_id, 'fields': sorted(changes)})
        return updated

    def delete_link(self, owner_id: str, token: str) -> bool:
        """Delete a link of `owner_id`.

        Returns:
            bool: True iff the link existed and belonged to the owner.
        """
        token = token_from_short_url(token, self.config.base_url)

        with self.locks.lock(token):
            removed = self.link_dao.remove(owner_id, token)

        logger.info('Deleted link.' if removed else 'Nothing to delete.', extra={'event': 'delete', 'token': token, 'owner_id': owner_id})
        return removed

    def list_links(self, owner_id: str) -> list[LinkModel]:
        """Return the live links of `owner_id` ordered by destination, then token."""
        if self.config.eager_sweep:
            self.eviction.sweep()

        now = self.clock()
        return [link for link in self.link_dao.links_of(owner_id) if is_live(link, now)]

    def short_url(self, token: str) -> str:
        return get_short_url(token, self.config.base_url)

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------

    def sweep(self) -> list[EvictionNotice]:
        return self.eviction.sweep()

    def start_periodic_sweep(self, interval: float | None = None) -> PeriodicSweeper | None:
        """Start background sweeps every `interval` seconds (`sweep_interval` by default).

        Returns:
            PeriodicSweeper | None: the running sweeper, or None if the interval is 0.
        """
        interval = self.config.sweep_interval if interval is None else interval
        if interval <= 0:
            return None

        if self._sweeper is None or not self._sweeper.running:
            self._sweeper = PeriodicSweeper(self.eviction, interval).start()
        return self._sweeper

    def stop_periodic_sweep(self) -> None:
        if self._sweeper is not None:
            self._sweeper.stop()
            self._sweeper = None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _lifetime(self, duration_text: str) -> timedelta:
        """Parse a duration text and clamp it to `max_expiry_duration`."""
        parsed = parse_duration(duration_text)
        if not parsed.parsed:
            raise InvalidDurationError(f"No valid duration found in '{duration_text}'.")
        return min(parsed.total, self.config.max_expiry_duration)

    def _visit_quota(self, visit_limit: int | None) -> int | None:
        if visit_limit is None:
            return None
        if isinstance(visit_limit, bool) or not isinstance(visit_limit, int):
            raise InvalidVisitLimitError(f'Visit limit must be an integer (given value: {visit_limit!r}).')
        return max(visit_limit, self.config.default_visit_floor)

    def _reachable_target(self, target: str) -> str:
        target = target.strip()
        if not target or not self.reachability(target):
            raise UnreachableURLError(f"Destination URL '{target}' is not reachable.")
        return target

    def _owned_link(self, owner_id: str, token: str) -> LinkModel:
        found = self.link_dao.find(token) if token else None
        if found is None:
            raise LinkNotFoundError(f"Link '{token}' not found.")

        link_owner, link = found
        if link_owner != owner_id:
            raise LinkNotOwnedError(f"Link '{token}' belongs to another user.")
        if not is_live(link, self.clock()):
            raise LinkNotFoundError(f"Link '{token}' not found.")
        return link
