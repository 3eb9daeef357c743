"""Abstract repository for Inventory aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ims.domain.model.inventory import Inventory


class InventoryRepository(ABC):

    @abstractmethod
    def get_by_product_id(self, product_id: str) -> Inventory | None:
        """Return a copy of the inventory row for a product, or None."""

    @abstractmethod
    def list_all(self) -> list[Inventory]:
        """Return every inventory row."""

    @abstractmethod
    def add(self, item: Inventory) -> None:
        """Stage a new inventory row.  Raises ConflictError if one exists."""

    @abstractmethod
    def save(self, item: Inventory, expected_version: int) -> None:
        """Stage an update conditioned on the version that was read.

        The stored version becomes ``expected_version + 1`` on commit.
        Raises ConcurrentModificationError when the committed row no
        longer carries ``expected_version``.
        """
