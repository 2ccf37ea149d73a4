"""JSON file snapshot store

Keeps the whole user/link mapping in a single JSON file. Saves are atomic: the
document is written to a temporary file next to the target and moved into place,
so a crash mid-write leaves the previous snapshot intact.

Example:
    >>> store = JsonSnapshotStore('user_data.json')
    >>> store.save({'version': 1, 'users': {}})
    >>> store.load()
    {'version': 1, 'users': {}}
"""

import json
import os
import tempfile
from pathlib import Path

from linkshortener.dao.exceptions import DataStoreError
from linkshortener.dao.snapshot.base import SnapshotBaseStore
from linkshortener.types import Snapshot


class JsonSnapshotStore(SnapshotBaseStore):
    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def load(self) -> Snapshot | None:
        try:
            with self.path.open(encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:  # ValueError covers JSON and UTF-8 decode errors
            raise DataStoreError(f"Can't read snapshot from {self.path}.") from e

    def save(self, snapshot: Snapshot) -> None:
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f'.{self.path.name}.', suffix='.tmp', dir=directory)
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(snapshot, f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise DataStoreError(f"Can't write snapshot to {self.path}.") from e
