"""Eviction of links that are no longer live

A link is live iff it is not expired (`now < expires_at`) and its visit quota,
if any, is not spent (`visits_left > 0`). Dead links are removed in two ways:

    - lazily, one token at a time, when an operation runs into a dead link
      (`EvictionEngine.evict`)
    - eagerly, by a full sweep over every stored link (`EvictionEngine.sweep`),
      either before listing/resolving/editing or periodically from a
      background thread (`PeriodicSweeper`)

Every removal produces one EvictionNotice which is logged and handed to the
registered listeners.

Example:
    >>> engine = EvictionEngine(link_dao, locks=TokenLocks())
    >>> engine.add_listener(lambda notice: print(notice.token, notice.reason))
    >>> engine.sweep()
    aB3xY9 expired
    [EvictionNotice(token='aB3xY9', target='https://example.com', owner_id='6f1c...', reason=<EvictionReason.EXPIRED: 'expired'>)]
"""

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime

from linkshortener.dao.base import LinkBaseDAO
from linkshortener.models import EvictionNotice, EvictionReason, LinkModel
from linkshortener.service.locks import TokenLocks
from linkshortener.types import Clock
from linkshortener.utils.helpers import utcnow


logger = logging.getLogger(__name__)

type EvictionListener = Callable[[EvictionNotice], None]


def liveness(link: LinkModel, now: datetime) -> EvictionReason | None:
    """Return why `link` is not live at `now`, or None if it is live."""
    if link.expires_at is not None and now >= link.expires_at:
        return EvictionReason.EXPIRED
    if link.visits_left is not None and link.visits_left <= 0:
        return EvictionReason.QUOTA_EXHAUSTED
    return None


def is_live(link: LinkModel, now: datetime) -> bool:
    return liveness(link, now) is None


class EvictionEngine:
    """Removes dead links from a link store.

    Attributes:
        link_dao (LinkBaseDAO):
            Store the links are removed from.
        locks (TokenLocks):
            Per-token locks shared with the link service. Every removal
            re-checks liveness while holding the token's lock.
        clock (Clock):
            Source of the current time.
    """

    def __init__(
        self,
        link_dao: LinkBaseDAO,
        locks: TokenLocks | None = None,
        clock: Clock = utcnow,
        listeners: Iterable[EvictionListener] = (),
    ):
        self.link_dao = link_dao
        self.locks = locks if locks is not None else TokenLocks()
        self.clock = clock
        self._listeners: list[EvictionListener] = list(listeners)

    def add_listener(self, listener: EvictionListener) -> None:
        self._listeners.append(listener)

    def sweep(self) -> list[EvictionNotice]:
        """Remove every dead link.

        Candidates are selected from a point-in-time copy of the store and each
        one is re-checked under its token lock before removal, so links edited
        back to life in the meantime survive. Running it twice in a row without
        time passing removes nothing the second time.

        Returns:
            list[EvictionNotice]: one notice per removed link.
        """
        now = self.clock()
        candidates = [link.token for _, link in self.link_dao.all_links() if not is_live(link, now)]

        notices = []
        for token in candidates:
            notice = self.evict(token, now=now)
            if notice is not None:
                notices.append(notice)

        logger.debug('Eviction sweep finished.', extra={'event': 'sweep', 'candidates': len(candidates), 'evicted': len(notices)})
        return notices

    def evict(self, token: str, now: datetime | None = None) -> EvictionNotice | None:
        """Remove the link of `token` if it is not live.

        Returns:
            EvictionNotice | None: the notice of the removal, or None if the link
            is absent or still live.
        """
        with self.locks.lock(token):
            found = self.link_dao.find(token)
            if found is None:
                return None

            owner_id, link = found
            reason = liveness(link, now if now is not None else self.clock())
            if reason is None or not self.link_dao.remove(owner_id, token):
                return None

        notice = EvictionNotice(token=token, target=link.target, owner_id=owner_id, reason=reason)
        logger.info(
            'Evicted link.',
            extra={'event': 'eviction', 'token': token, 'target': link.target, 'owner_id': owner_id, 'reason': reason},
        )
        self._notify(notice)
        return notice

    def _notify(self, notice: EvictionNotice) -> None:
        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception:
                logger.exception('Eviction listener failed.', extra={'token': notice.token})


class PeriodicSweeper:
    """Background daemon thread running `engine.sweep()` every `interval` seconds.

    A failing sweep is logged and retried on the next tick.

    Example:
        >>> sweeper = PeriodicSweeper(engine, interval=60).start()
        >>> sweeper.stop()
    """

    def __init__(self, engine: EvictionEngine, interval: float):
        if interval <= 0:
            raise ValueError(f'Sweep interval must be positive (given: {interval}).')

        self.engine = engine
        self.interval = interval
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> 'PeriodicSweeper':
        if self.running:
            return self

        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name='eviction-sweeper', daemon=True)
        self._thread.start()
        logger.info('Started periodic eviction sweeps.', extra={'interval': self.interval})
        return self

    def stop(self, timeout: float | None = None) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            try:
                self.engine.sweep()
            except Exception:
                logger.exception('Periodic eviction sweep failed.')
