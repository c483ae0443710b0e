"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from checkout.domain.exceptions import InvalidRequestError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise InvalidRequestError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise InvalidRequestError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def apply_rate(self, rate: Decimal) -> Money:
        """Return ``self * rate`` rounded half-up to whole cents."""
        scaled = (self.amount * rate).quantize(CENTS, rounding=ROUND_HALF_UP)
        return Money(scaled, self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise InvalidRequestError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)

    @staticmethod
    def of(amount: str | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidRequestError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity."""

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise InvalidRequestError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise InvalidRequestError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


_INVOICE_PATTERN = re.compile(r"^INV-(\d{8})-(\d{3,})$")


@dataclass(frozen=True, order=True)
class InvoiceNumber:
    """Per-day invoice identifier rendered as ``INV-YYYYMMDD-NNN``.

    The sequence is zero-padded to three digits and simply widens past 999,
    so numbers stay unique on very busy days.
    """

    date: date
    sequence: int

    def __post_init__(self) -> None:
        if self.sequence <= 0:
            raise InvalidRequestError("Invoice sequence must be positive")

    def __str__(self) -> str:
        return f"{self.prefix_for(self.date)}-{self.sequence:03d}"

    @staticmethod
    def prefix_for(day: date) -> str:
        return f"INV-{day:%Y%m%d}"

    @staticmethod
    def parse(raw: str) -> InvoiceNumber:
        match = _INVOICE_PATTERN.match(raw)
        if match is None:
            raise InvalidRequestError(f"Malformed invoice number: {raw!r}")
        digits, sequence = match.groups()
        try:
            day = date(int(digits[:4]), int(digits[4:6]), int(digits[6:]))
        except ValueError as exc:
            raise InvalidRequestError(f"Malformed invoice number: {raw!r}") from exc
        return InvoiceNumber(date=day, sequence=int(sequence))
