"""Domain service: Invoice Sequencer.

Issues ``INV-YYYYMMDD-NNN`` numbers. Each calendar day has its own
durable counter in the SequenceStore; the counter is bumped with a single
atomic increment-and-read, inside one process-wide critical section.
Existing orders are never scanned to guess the next number.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import date

from checkout.domain.exceptions import SequencerUnavailableError, StorageError
from checkout.domain.model.value_objects import InvoiceNumber
from checkout.domain.repository.sequence_store import SequenceStore

logger = logging.getLogger(__name__)


class InvoiceSequencer:

    def __init__(
        self,
        sequence_store: SequenceStore,
        lock_timeout: float | None = None,
    ) -> None:
        self._sequence_store = sequence_store
        self._lock_timeout = lock_timeout
        self._lock = threading.Lock()

    def next_invoice_number(self, on: date) -> InvoiceNumber:
        """Return a number no other caller has received for *on*."""
        key = InvoiceNumber.prefix_for(on)
        timeout = -1 if self._lock_timeout is None else self._lock_timeout
        if not self._lock.acquire(timeout=timeout):
            raise SequencerUnavailableError(f"Timed out waiting to issue {key} number")
        try:
            sequence = self._sequence_store.increment(key)
        except StorageError as exc:
            raise SequencerUnavailableError(f"Counter store unavailable for {key}") from exc
        finally:
            self._lock.release()

        number = InvoiceNumber(date=on, sequence=sequence)
        logger.debug("Issued invoice number %s", number)
        return number

    def reconcile(self, issued: Iterable[InvoiceNumber]) -> None:
        """Make sure no counter is behind the numbers already handed out.

        Called at startup with the invoice numbers of every stored order.
        """
        highest: dict[str, int] = {}
        for number in issued:
            key = InvoiceNumber.prefix_for(number.date)
            highest[key] = max(highest.get(key, 0), number.sequence)

        with self._lock:
            for key, sequence in highest.items():
                try:
                    self._sequence_store.ensure_at_least(key, sequence)
                except StorageError as exc:
                    raise SequencerUnavailableError(
                        f"Counter store unavailable for {key}"
                    ) from exc
