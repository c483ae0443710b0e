"""Abstract durable counter store used for invoice numbering."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SequenceStore(ABC):

    @abstractmethod
    def increment(self, key: str) -> int:
        """Atomically add one to the counter for *key* and return the new value.

        Counters start at zero, so the first call for a key returns 1.
        """

    @abstractmethod
    def ensure_at_least(self, key: str, value: int) -> None:
        """Raise the counter for *key* to *value* if it is currently lower."""
