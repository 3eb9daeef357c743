"""Application service: Reserve Stock use case.

Takes stock out of the available pool and records a time-bounded hold.
The decrement and the reservation row commit together, so a lost write
race leaves nothing behind and the whole attempt is simply re-run
against fresh state.
"""

from __future__ import annotations

import logging

from ims.application.dto import ReservationDTO
from ims.application.expiry_sweeper import ExpirySweeper
from ims.application.retry import run_with_retry
from ims.application.settings import Clock, Settings, utc_now
from ims.domain.exceptions import (
    ConcurrentConflictError,
    DuplicateIdentifierError,
    ValidationError,
)
from ims.domain.model.reservation import Reservation
from ims.domain.repository.unit_of_work import UnitOfWorkFactory
from ims.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)

# Fresh ids to try when a generated 8-hex-char id is already taken.
_IDENTIFIER_DRAWS = 3


class ReserveStockHandler:

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

    def handle(self, product_id: str, quantity: int) -> ReservationDTO:
        """Reserve ``quantity`` units of a product.

        Raises InsufficientStockError straight away (no retry) when the
        stock is not there, and ConcurrentConflictError when every
        attempt lost its conditional write.
        """
        if not product_id:
            raise ValidationError("Product ID is required")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Quantity must be positive")

        now = self._clock()
        self._sweeper.sweep(now)

        def attempt() -> Reservation:
            for draw in range(1, _IDENTIFIER_DRAWS + 1):
                try:
                    with self._uow_factory() as uow:
                        StockLedger(uow.inventory).try_reserve(product_id, quantity)
                        reservation = Reservation.create(
                            product_id=product_id,
                            quantity=quantity,
                            now=now,
                            hold=self._settings.hold,
                        )
                        uow.reservations.add(reservation)
                        uow.commit()
                        return reservation
                except DuplicateIdentifierError as exc:
                    logger.debug("Identifier draw %d collided (%s); drawing again", draw, exc)
            raise ConcurrentConflictError(
                "Stock reservation could not allocate a unique order id. Please retry."
            )

        reservation = run_with_retry(attempt, self._settings.retry, "Stock reservation")

        logger.info(
            "Reserved %d of product '%s' for order %s until %s",
            quantity, product_id, reservation.order_id, reservation.expires_at.isoformat(),
        )
        return ReservationDTO(
            reservation_id=reservation.id,
            order_id=reservation.order_id,
            product_id=reservation.product_id,
            quantity=reservation.quantity,
            expires_at=reservation.expires_at.isoformat(),
            status=reservation.status.value,
        )
