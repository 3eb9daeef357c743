"""Application service: Get Available Stock use case (query)."""

from __future__ import annotations

from ims.application.dto import StockDTO
from ims.application.expiry_sweeper import ExpirySweeper
from ims.application.settings import Clock, Settings, utc_now
from ims.domain.exceptions import NotFoundError, ValidationError
from ims.domain.repository.unit_of_work import UnitOfWorkFactory
from ims.domain.service.stock_ledger import StockLedger


class GetAvailableStockHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: Settings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._sweeper = ExpirySweeper(uow_factory, (settings or Settings()).retry)

    def handle(self, product_id: str) -> StockDTO:
        if not product_id:
            raise ValidationError("Product ID is required")

        # Sweep first so lapsed holds are back in the pool before we read.
        self._sweeper.sweep(self._clock())

        with self._uow_factory() as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise NotFoundError("Product not found")
            available = StockLedger(uow.inventory).get_available(product_id)

        return StockDTO(product_id=product.id, name=product.name, available_stock=available)
