from linkshortener.dao.snapshot.base import SnapshotBaseStore
from linkshortener.dao.snapshot.json_snapshot_store import JsonSnapshotStore
from linkshortener.dao.snapshot.schema import dump_snapshot, load_snapshot


__all__ = [
    'SnapshotBaseStore',
    'JsonSnapshotStore',
    'dump_snapshot',
    'load_snapshot',
]
