"""Inventory aggregate — tracks stock per product.

Each product has one Inventory row that knows the total quantity in stock
and how much of it is still available for new reservations.  The
difference is the quantity held by RESERVED reservations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ims.domain.exceptions import InsufficientStockError, ValidationError


@dataclass
class Inventory:
    """Aggregate root for stock tracking.

    Invariants:
    - ``0 <= available_stock <= total_stock``
    - ``version`` only moves forward, by one per committed write; the
      store owns it, the methods below never touch it.
    """

    product_id: str
    total_stock: int
    available_stock: int
    version: int = 0
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def open(product_id: str, initial_stock: int) -> Inventory:
        if isinstance(initial_stock, bool) or not isinstance(initial_stock, int):
            raise ValidationError("Initial stock must be an integer")
        if initial_stock < 0:
            raise ValidationError("Initial stock cannot be negative")
        return Inventory(
            product_id=product_id,
            total_stock=initial_stock,
            available_stock=initial_stock,
        )

    @property
    def held_stock(self) -> int:
        """Quantity currently held by unconfirmed reservations."""
        return self.total_stock - self.available_stock

    def reserve(self, quantity: int) -> None:
        """Take *quantity* units out of the available pool.

        Raises InsufficientStockError when not enough is available; nothing
        is taken in that case.
        """
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available_stock:
            raise InsufficientStockError(requested=quantity, available=self.available_stock)
        self.available_stock -= quantity
        self._touch()

    def release(self, quantity: int) -> None:
        """Return previously held stock to the available pool."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        if quantity > self.held_stock:
            raise ValidationError(
                f"Cannot release {quantity} of product '{self.product_id}' "
                f"- only {self.held_stock} currently held"
            )
        self.available_stock += quantity
        self._touch()

    def restock(self, quantity: int) -> None:
        """Add new units; they are immediately available."""
        if quantity <= 0:
            raise ValidationError("Stock delta must be positive")
        self.total_stock += quantity
        self.available_stock += quantity
        self._touch()

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
