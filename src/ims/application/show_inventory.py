"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from ims.application.expiry_sweeper import ExpirySweeper
from ims.application.settings import Clock, Settings, utc_now
from ims.domain.repository.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    total: int
    held: int
    available: int


class ShowInventoryHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: Settings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._sweeper = ExpirySweeper(uow_factory, (settings or Settings()).retry)

    def handle(self) -> list[InventoryLineDTO]:
        self._sweeper.sweep(self._clock())

        with self._uow_factory() as uow:
            names = {p.id: p.name for p in uow.products.list_all()}
            items = uow.inventory.list_all()

        return [
            InventoryLineDTO(
                product_id=item.product_id,
                product_name=names.get(item.product_id, "?"),
                total=item.total_stock,
                held=item.held_stock,
                available=item.available_stock,
            )
            for item in sorted(items, key=lambda i: names.get(i.product_id, ""))
        ]
