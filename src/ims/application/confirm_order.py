"""Application service: Confirm Order use case.

Turns a live reservation into an order.  Stock is not touched: it was
taken out of the available pool when the reservation was made.  The
RESERVED -> CONFIRMED transition and the new order commit together.
"""

from __future__ import annotations

import logging

from ims.application.dto import OrderDTO
from ims.application.expiry_sweeper import ExpirySweeper
from ims.application.settings import Clock, Settings, utc_now
from ims.domain.exceptions import (
    ConflictError,
    DomainException,
    ExpiredReservationError,
    NotFoundError,
    StaleStateError,
    ValidationError,
)
from ims.domain.model.order import Order
from ims.domain.model.reservation import ReservationStatus
from ims.domain.repository.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class ConfirmOrderHandler:

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

    def handle(self, order_id: str) -> OrderDTO:
        if not order_id or not order_id.strip():
            raise ValidationError("Order ID is required")
        order_id = order_id.strip()

        now = self._clock()
        self._sweeper.sweep(now)

        with self._uow_factory() as uow:
            reservation = uow.reservations.get_by_order_id(order_id)
            if reservation is None:
                raise NotFoundError(f"No reservation found for order '{order_id}'")

            # A due reservation whose sweep could not finish is still expired.
            if reservation.status == ReservationStatus.EXPIRED or reservation.is_due(now):
                raise _expired(order_id)
            if reservation.status == ReservationStatus.CONFIRMED:
                raise _already_confirmed(order_id)

            try:
                uow.reservations.transition(
                    reservation.id, ReservationStatus.RESERVED, ReservationStatus.CONFIRMED
                )
                uow.orders.add(
                    Order(
                        id=order_id,
                        product_id=reservation.product_id,
                        quantity=reservation.quantity,
                        created_at=now,
                    )
                )
                uow.commit()
            except StaleStateError as exc:
                raise _translate(order_id, exc) from exc

        logger.info(
            "Confirmed order %s: %d of product '%s'",
            order_id, reservation.quantity, reservation.product_id,
        )
        return OrderDTO(order_id=order_id, status=ReservationStatus.CONFIRMED.value)


# --- Error mapping ------------------------------------------------------------


def _expired(order_id: str) -> ExpiredReservationError:
    return ExpiredReservationError(
        f"Reservation for order '{order_id}' has expired. Reserve the stock again."
    )


def _already_confirmed(order_id: str) -> ConflictError:
    return ConflictError(f"Order '{order_id}' is already confirmed")


def _translate(order_id: str, exc: StaleStateError) -> DomainException:
    """A racing sweep or confirm moved the reservation first."""
    if exc.actual == ReservationStatus.CONFIRMED:
        return _already_confirmed(order_id)
    return _expired(order_id)
