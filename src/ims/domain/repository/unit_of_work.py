"""Abstract unit of work.

One unit of work is one atomic store transaction: repositories read
committed rows and stage writes; ``commit()`` re-validates every staged
precondition and applies all of them, or none.  Leaving the ``with``
block without committing discards the staged writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.order_repository import OrderRepository
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.repository.reservation_repository import ReservationRepository


class AbstractUnitOfWork(ABC):

    products: ProductRepository
    inventory: InventoryRepository
    reservations: ReservationRepository
    orders: OrderRepository

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Apply staged writes atomically."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged writes.  Safe to call after commit."""


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]
