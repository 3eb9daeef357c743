"""Application service: Add Stock (restock) use case."""

from __future__ import annotations

import logging

from ims.application.dto import StockUpdateDTO
from ims.application.expiry_sweeper import ExpirySweeper
from ims.application.retry import run_with_retry
from ims.application.settings import Clock, Settings, utc_now
from ims.domain.exceptions import NotFoundError, ValidationError
from ims.domain.model.inventory import Inventory
from ims.domain.repository.unit_of_work import UnitOfWorkFactory
from ims.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class AddStockHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: Settings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._settings = settings or Settings()
        self._clock = clock
        self._sweeper = ExpirySweeper(uow_factory, self._settings.retry)

    def handle(self, product_id: str, delta: int) -> StockUpdateDTO:
        """Add ``delta`` units to a product's total and available stock."""
        if not product_id:
            raise ValidationError("Product ID is required")
        if isinstance(delta, bool) or not isinstance(delta, int) or delta <= 0:
            raise ValidationError("Stock must be positive")

        self._sweeper.sweep(self._clock())

        def attempt() -> Inventory:
            with self._uow_factory() as uow:
                if uow.products.get_by_id(product_id) is None:
                    raise NotFoundError("Product not found")
                item = StockLedger(uow.inventory).increase_total(product_id, delta)
                uow.commit()
                return item

        item = run_with_retry(attempt, self._settings.retry, "Stock update")

        logger.info("Added %d to product '%s'; total is now %d", delta, product_id, item.total_stock)
        return StockUpdateDTO(
            product_id=product_id,
            message="Stock updated successfully",
            delta=delta,
            new_total=item.total_stock,
        )
