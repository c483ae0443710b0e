"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

``StorageError`` is not a DomainException: repositories raise it, and the
order-placement core translates it into one of the typed infrastructure
failures below.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class InvalidRequestError(DomainException):
    """Malformed input or a violated invariant. Not retryable as-is."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ItemsUnavailableError(DomainException):
    """One or more catalog items are missing or already reserved."""

    def __init__(self, item_ids: list[int]) -> None:
        self.item_ids = sorted(item_ids)
        ids = ", ".join(f"#{item_id}" for item_id in self.item_ids)
        super().__init__(f"Items not available: {ids}")


class UnauthorizedError(DomainException):
    """The requester may not see or change the requested resource."""


class InfrastructureError(DomainException):
    """A backing service failed. Retryable after backoff."""


class SequencerUnavailableError(InfrastructureError):
    """No invoice number could be issued."""


class PersistenceFailedError(InfrastructureError):
    """A durable write did not complete."""


class ReservationTimeoutError(InfrastructureError):
    """Gave up waiting for a catalog item lock."""


class StorageError(Exception):
    """Raised by repository implementations when the backing store fails."""
