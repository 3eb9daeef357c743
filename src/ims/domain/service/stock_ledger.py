"""Domain service: Stock Ledger.

The only component that changes ``total_stock``, ``available_stock`` or
``version`` on an inventory row.  Every mutation is read-then-conditional
write: the row is read, changed in memory, and saved against the version
that was read.  Losing the race surfaces as ConcurrentModificationError,
either here (fail fast) or when the unit of work commits; the caller owns
the retry.
"""

from __future__ import annotations

import logging

from ims.domain.exceptions import ConflictError, NotFoundError
from ims.domain.model.inventory import Inventory
from ims.domain.model.value_objects import Quantity
from ims.domain.repository.inventory_repository import InventoryRepository

logger = logging.getLogger(__name__)


class StockLedger:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def create_inventory(self, product_id: str, initial_stock: int) -> Inventory:
        """Open the inventory row for a new product (version 0)."""
        if self._inventory_repo.get_by_product_id(product_id) is not None:
            raise ConflictError(f"Inventory for product '{product_id}' already exists")
        item = Inventory.open(product_id, initial_stock)
        self._inventory_repo.add(item)
        return item

    def increase_total(self, product_id: str, delta: int) -> Inventory:
        """Restock: *delta* is added to both total and available stock."""
        qty = Quantity(delta).value
        item = self._load(product_id)
        read_version = item.version
        item.restock(qty)
        self._inventory_repo.save(item, expected_version=read_version)
        return item

    def try_reserve(self, product_id: str, quantity: int) -> Inventory:
        """Take *quantity* out of available stock, all or nothing.

        Raises InsufficientStockError (with requested and available
        amounts) before anything is written.
        """
        qty = Quantity(quantity).value
        item = self._load(product_id)
        read_version = item.version
        item.reserve(qty)
        self._inventory_repo.save(item, expected_version=read_version)
        return item

    def release(self, product_id: str, quantity: int) -> Inventory:
        """Give held stock back to the available pool."""
        qty = Quantity(quantity).value
        item = self._load(product_id)
        read_version = item.version
        item.release(qty)
        self._inventory_repo.save(item, expected_version=read_version)
        logger.debug("Released %d of product '%s' at version %d", qty, product_id, read_version)
        return item

    def get_available(self, product_id: str) -> int:
        return self._load(product_id).available_stock

    # --- Internal helpers -----------------------------------------------------

    def _load(self, product_id: str) -> Inventory:
        item = self._inventory_repo.get_by_product_id(product_id)
        if item is None:
            raise NotFoundError(f"No inventory record for product '{product_id}'")
        return item
