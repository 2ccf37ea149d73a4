"""Data models of the link shortener.

All models are frozen dataclasses. State changes always replace a whole record,
so concurrent readers never observe a half-updated link.

Classes:
    UserModel:
        A user, identified by a stable UUID and a unique letters-only name.
    LinkModel:
        A short link: token, destination, expiry and optional visit quota.
    EvictionReason:
        Why a link stopped being live.
    EvictionNotice:
        Notification emitted for every link removed by the eviction engine.

Example:
    >>> from datetime import datetime, timedelta, UTC
    >>> link = LinkModel(
    ...     token='aB3xY9',
    ...     target='https://example.com/article/123',
    ...     expires_at=datetime.now(UTC) + timedelta(hours=1),
    ...     visits_left=5,
    ... )
    >>> link.visits_left
    5
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


# fmt: off
@dataclass(frozen=True)
class UserModel:
    user_id: str    # Stable opaque identifier (UUID4)
    name: str       # Unique, letters-only user name


@dataclass(frozen=True)
class LinkModel:
    token: str                          # Globally unique short identifier
    target: str                         # Destination URL
    expires_at: datetime | None = None  # Absolute expiry (UTC); None only for legacy data
    visits_left: int | None = None      # Remaining redirect quota; None means unlimited
# fmt: on


class EvictionReason(StrEnum):
    EXPIRED = 'expired'
    QUOTA_EXHAUSTED = 'quota_exhausted'


@dataclass(frozen=True)
class EvictionNotice:
    token: str
    target: str
    owner_id: str
    reason: EvictionReason
