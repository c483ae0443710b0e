"""JSON-file-backed implementation of SequenceStore.

Counters live in one JSON object, ``{"INV-20261019": 42, ...}``.
"""

from __future__ import annotations

from pathlib import Path

from checkout.domain.repository.sequence_store import SequenceStore
from checkout.infrastructure.persistence.json_file import JsonFile


class JsonSequenceStore(SequenceStore):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty={})

    def increment(self, key: str) -> int:
        with self._file.transaction() as counters:
            value = counters.get(key, 0) + 1
            counters[key] = value
        return value

    def ensure_at_least(self, key: str, value: int) -> None:
        with self._file.transaction() as counters:
            if counters.get(key, 0) < value:
                counters[key] = value
