"""
Flat JSON collection store.

Each collection (time entries, personal goals) is one JSON array on disk.
Callers work on snapshots: ``read`` returns a full copy, ``update`` applies a
pure function to a snapshot and writes the result back. Writes to the same
file are serialized with a per-path lock and land via atomic rename, so a
reader never sees a half-written collection.
"""

import json
import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _locks_guard:
        if path not in _locks:
            _locks[path] = threading.Lock()
        return _locks[path]


class JsonStore:
    """One JSON-array collection file."""

    def __init__(self, path: Path):
        self.path = Path(path).resolve()
        self._lock = _lock_for(self.path)

    def read(self) -> list[dict]:
        """
        Load a snapshot of the collection.

        A missing file is an empty collection. A file that holds something
        other than a JSON array is treated as empty too; invalid JSON raises.
        """
        if not self.path.exists():
            return []
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, list) else []

    def _write_unlocked(self, snapshot: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write next to the target so os.replace stays on one filesystem
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(snapshot, tmp, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self.path)
        finally:
            tmp_path.unlink(missing_ok=True)

    def write(self, snapshot: list[dict]) -> None:
        """Replace the whole collection."""
        with self._lock:
            self._write_unlocked(snapshot)

    def update(self, mutator: Callable[[list[dict]], list[dict]]) -> list[dict]:
        """
        Read-modify-write under the collection lock.

        ``mutator`` receives the current snapshot and returns the new one.
        Returns the snapshot that was written.
        """
        with self._lock:
            snapshot = self.read()
            updated = mutator(snapshot)
            self._write_unlocked(updated)
            return updated
