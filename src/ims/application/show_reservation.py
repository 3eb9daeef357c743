"""Application service: Show Reservation use case (query).

Reports where a reservation is in its lifecycle; the sweep runs first,
so a lapsed hold is reported as EXPIRED rather than RESERVED.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.application.expiry_sweeper import ExpirySweeper
from ims.application.settings import Clock, Settings, utc_now
from ims.domain.exceptions import NotFoundError, ValidationError
from ims.domain.repository.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True)
class ReservationDetailDTO:
    reservation_id: str
    order_id: str
    product_id: str
    quantity: int
    status: str
    created_at: str
    expires_at: str
    has_order: bool


class ShowReservationHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        settings: Settings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._sweeper = ExpirySweeper(uow_factory, (settings or Settings()).retry)

    def handle(self, order_id: str) -> ReservationDetailDTO:
        if not order_id or not order_id.strip():
            raise ValidationError("Order ID is required")
        order_id = order_id.strip()

        self._sweeper.sweep(self._clock())

        with self._uow_factory() as uow:
            reservation = uow.reservations.get_by_order_id(order_id)
            if reservation is None:
                raise NotFoundError(f"No reservation found for order '{order_id}'")
            has_order = uow.orders.get_by_id(order_id) is not None

        return ReservationDetailDTO(
            reservation_id=reservation.id,
            order_id=reservation.order_id,
            product_id=reservation.product_id,
            quantity=reservation.quantity,
            status=reservation.status.value,
            created_at=reservation.created_at.isoformat(),
            expires_at=reservation.expires_at.isoformat(),
            has_order=has_order,
        )
