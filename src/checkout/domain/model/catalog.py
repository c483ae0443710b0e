"""CatalogItem aggregate.

Every item in the gallery is one of a kind: a single boolean flag says
whether it can still be bought. Only the reservation engine flips it.
"""

from __future__ import annotations

from dataclasses import dataclass

from checkout.domain.exceptions import InvalidRequestError
from checkout.domain.model.value_objects import Money


@dataclass
class CatalogItem:
    """Aggregate root for a purchasable catalog item.

    Invariants:
    - an item that is already reserved cannot be reserved again
    - only a reserved item can be restored
    """

    id: int | None
    title: str
    artist: str
    price: Money
    is_available: bool = True

    def reserve(self) -> None:
        """Claim the single unit of this item."""
        if not self.is_available:
            raise InvalidRequestError(f"Item #{self.id} '{self.title}' is already reserved")
        self.is_available = False

    def restore(self) -> None:
        """Make a previously reserved item purchasable again."""
        if self.is_available:
            raise InvalidRequestError(f"Item #{self.id} '{self.title}' is not reserved")
        self.is_available = True
