"""Application service: Add Product use case.

Creates the product and its inventory row in one unit of work, so a
product never exists without stock bookkeeping.
"""

from __future__ import annotations

import logging

from ims.application.dto import ProductDTO
from ims.domain.exceptions import ConflictError, ValidationError
from ims.domain.model.product import Product
from ims.domain.repository.unit_of_work import UnitOfWorkFactory
from ims.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, name: str, initial_stock: int) -> ProductDTO:
        """Add a new product with ``initial_stock`` units on hand."""
        if not name or not name.strip():
            raise ValidationError("Name is required")
        if isinstance(initial_stock, bool) or not isinstance(initial_stock, int):
            raise ValidationError("Stock is required")
        if initial_stock <= 0:
            raise ValidationError("Stock must be positive")

        with self._uow_factory() as uow:
            if uow.products.get_by_name(name.strip()) is not None:
                raise ConflictError(f"Product with name '{name.strip()}' already exists")

            product = Product.create(name)
            uow.products.add(product)
            StockLedger(uow.inventory).create_inventory(product.id, initial_stock)
            uow.commit()

        logger.info("Added product '%s' (%s) with %d in stock", product.name, product.id, initial_stock)
        return ProductDTO(product_id=product.id, name=product.name)
