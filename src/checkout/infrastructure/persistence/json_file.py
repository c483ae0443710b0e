"""Shared file handling for the JSON-backed repositories.

Each data file has one lock per process. Every read-modify-write runs
under that lock, and writes go to a temporary file that then replaces
the original with ``os.replace``, so readers only ever see a complete
file.
"""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from checkout.domain.exceptions import StorageError

_LOCKS: dict[Path, threading.RLock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    with _LOCKS_GUARD:
        lock = _LOCKS.get(path)
        if lock is None:
            lock = _LOCKS[path] = threading.RLock()
        return lock


class JsonFile:

    def __init__(self, file_path: Path, empty: Any) -> None:
        self._file_path = file_path
        self._empty = empty
        self._lock = _lock_for(file_path.resolve())
        self._ensure_file()

    def load(self) -> Any:
        with self._lock:
            try:
                return json.loads(self._file_path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raise StorageError(f"Cannot read {self._file_path}: {exc}") from exc

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Yield the file contents; write them back if the block succeeds."""
        with self._lock:
            data = self.load()
            yield data
            self._persist(data)

    # --- File helpers ---------------------------------------------------------

    def _persist(self, data: Any) -> None:
        tmp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp_path, self._file_path)
        except OSError as exc:
            raise StorageError(f"Cannot write {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        with self._lock:
            if self._file_path.exists():
                return
            try:
                self._file_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageError(f"Cannot create {self._file_path.parent}: {exc}") from exc
            self._persist(self._empty)
