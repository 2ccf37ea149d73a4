"""Explicit (de)serialization of the full user/link mapping.

Snapshot document (version 1):

    {
        "version": 1,
        "users": {
            "alice": {
                "uuid": "6f1c0d6e-...",
                "links": {
                    "aB3xY9": {
                        "target": "https://example.com",
                        "expires_at": "2026-10-19T13:00:00+00:00",
                        "visits_left": 2
                    }
                }
            }
        }
    }

Legacy documents (no "version" key) map user names straight to
{"uuid": ..., "links": {<short url>: <destination>}}. They are migrated on
load: the token is the last path segment of the short URL, and the link never
expires and has no visit quota.

Functions:
    dump_snapshot(users, links) -> Snapshot
    load_snapshot(document) -> tuple[list[UserModel], dict[str, list[LinkModel]]]
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, UTC
from typing import Any

from linkshortener.constants import SNAPSHOT_VERSION
from linkshortener.dao.exceptions import SnapshotFormatError
from linkshortener.models import LinkModel, UserModel
from linkshortener.types import Snapshot


def _dump_link(link: LinkModel) -> dict[str, Any]:
    return {
        'target': link.target,
        'expires_at': link.expires_at.isoformat() if link.expires_at is not None else None,
        'visits_left': link.visits_left,
    }


def dump_snapshot(users: Iterable[UserModel], links: Mapping[str, Mapping[str, LinkModel]]) -> Snapshot:
    """Serialize users and their links into a snapshot document

    Args:
        users (Iterable[UserModel]):
            Every known user.
        links (Mapping[str, Mapping[str, LinkModel]]):
            owner_id -> token -> link.

    Returns:
        Snapshot: JSON-serializable document.
    """
    return {
        'version': SNAPSHOT_VERSION,
        'users': {
            user.name: {
                'uuid': user.user_id,
                'links': {token: _dump_link(link) for token, link in sorted(links.get(user.user_id, {}).items())},
            }
            for user in sorted(users, key=lambda u: u.name)
        },
    }


def _parse_timestamp(value: Any, token: str) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SnapshotFormatError(f"Link '{token}' has a non-string 'expires_at' ({value!r}).")
    try:
        timestamp = datetime.fromisoformat(value)
    except ValueError as e:
        raise SnapshotFormatError(f"Link '{token}' has a malformed 'expires_at' ({value!r}).") from e
    return timestamp if timestamp.tzinfo is not None else timestamp.replace(tzinfo=UTC)


def _load_link(key: str, value: Any) -> LinkModel:
    if isinstance(value, str):
        # Legacy entry: <short url> -> <destination>
        return LinkModel(token=key.rstrip('/').rsplit('/', 1)[-1], target=value)

    if not isinstance(value, Mapping) or not isinstance(value.get('target'), str):
        raise SnapshotFormatError(f"Link '{key}' is missing a string 'target'.")

    visits_left = value.get('visits_left')
    if visits_left is not None and (isinstance(visits_left, bool) or not isinstance(visits_left, int)):
        raise SnapshotFormatError(f"Link '{key}' has a non-integer 'visits_left' ({visits_left!r}).")

    return LinkModel(
        token=key,
        target=value['target'],
        expires_at=_parse_timestamp(value.get('expires_at'), key),
        visits_left=max(visits_left, 0) if visits_left is not None else None,
    )


def load_snapshot(document: Any) -> tuple[list[UserModel], dict[str, list[LinkModel]]]:
    """Deserialize a snapshot document (current or legacy format)

    Args:
        document (Any):
            Decoded JSON document.

    Returns:
        tuple[list[UserModel], dict[str, list[LinkModel]]]:
            Users, and the links of every owner keyed by owner_id.

    Raises:
        SnapshotFormatError:
            If the document does not follow either schema.
    """
    if not isinstance(document, Mapping):
        raise SnapshotFormatError(f'Snapshot must be a JSON object (given type: {type(document).__name__}).')

    if 'version' in document:
        if document['version'] != SNAPSHOT_VERSION:
            raise SnapshotFormatError(f"Unsupported snapshot version {document['version']!r}.")
        entries = document.get('users')
        if not isinstance(entries, Mapping):
            raise SnapshotFormatError("Snapshot is missing the 'users' object.")
    else:
        entries = document

    users = []
    links = {}
    for name, entry in entries.items():
        if not isinstance(entry, Mapping) or not isinstance(entry.get('uuid'), str):
            raise SnapshotFormatError(f"User '{name}' is missing a string 'uuid'.")
        user_links = entry.get('links') or {}
        if not isinstance(user_links, Mapping):
            raise SnapshotFormatError(f"User '{name}' has a malformed 'links' object.")

        user = UserModel(user_id=entry['uuid'], name=name)
        users.append(user)
        links[user.user_id] = [_load_link(key, value) for key, value in user_links.items()]

    return users, links
