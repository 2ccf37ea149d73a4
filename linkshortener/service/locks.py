import threading

import xxhash

from linkshortener.constants import Defaults


class TokenLocks:
    """Striped registry of per-token locks.

    Every token maps to one of a fixed number of re-entrant locks, so operations
    on the same token are serialized while unrelated tokens rarely contend.
    Tokens are hashed with xxhash, which is stable across processes (unlike `hash()`).

    Example:
        >>> locks = TokenLocks()
        >>> with locks.lock('aB3xY9'):
        ...     ...  # read-modify-write of link 'aB3xY9'
    """

    def __init__(self, stripes: int = Defaults.LOCK_STRIPES):
        if stripes < 1:
            raise ValueError(f'Lock registry needs at least one stripe (given: {stripes}).')
        self._locks = tuple(threading.RLock() for _ in range(stripes))

    def __len__(self) -> int:
        return len(self._locks)

    def lock(self, token: str) -> threading.RLock:
        return self._locks[xxhash.xxh32_intdigest(token.encode()) % len(self._locks)]
