"""Abstract repository for Order records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ims.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Stage a new order.  Raises ConflictError if the id is taken."""
