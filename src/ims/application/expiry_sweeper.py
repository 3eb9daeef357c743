"""Expiry Sweeper — lazy, request-triggered release of lapsed holds.

Every public operation calls ``sweep(now)`` before doing its own work;
there is no background timer, so a reservation can sit past its
deadline until the next request arrives.

Each due reservation is expired in its own unit of work: the
RESERVED -> EXPIRED transition and the stock release commit together or
not at all.  A write conflict rolls both back and the pair is retried.
A reservation that cannot be expired at all is logged and skipped, so it
never blocks the operation that triggered the sweep.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime

from ims.application.retry import RetryPolicy, run_with_retry
from ims.domain.exceptions import ConcurrentConflictError, DomainException, StaleStateError
from ims.domain.model.reservation import Reservation, ReservationStatus
from ims.domain.repository.unit_of_work import UnitOfWorkFactory
from ims.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class ExpirySweeper:

    def __init__(self, uow_factory: UnitOfWorkFactory, retry: RetryPolicy) -> None:
        self._uow_factory = uow_factory
        self._retry = retry

    def sweep(self, now: datetime) -> int:
        """Expire every reservation due at *now*; return how many were expired."""
        with self._uow_factory() as uow:
            due = uow.reservations.find_due(now)

        expired = 0
        for reservation in due:
            try:
                if run_with_retry(
                    functools.partial(self._expire, reservation),
                    self._retry,
                    f"Expiring reservation '{reservation.id}'",
                ):
                    expired += 1
            except ConcurrentConflictError:
                # The transition was rolled back with the release, so the
                # reservation is still RESERVED and the next sweep retries it.
                logger.warning(
                    "Stock-leak risk: could not release %d of product '%s' held by "
                    "reservation '%s' (order %s); left RESERVED for the next sweep",
                    reservation.quantity, reservation.product_id,
                    reservation.id, reservation.order_id,
                )
            except DomainException as exc:
                logger.error(
                    "Stock-leak risk: expiring reservation '%s' (order %s) of %d of "
                    "product '%s' failed: %s; left RESERVED",
                    reservation.id, reservation.order_id, reservation.quantity,
                    reservation.product_id, exc,
                )

        if expired:
            logger.info("Expired %d reservation(s)", expired)
        return expired

    def _expire(self, reservation: Reservation) -> bool:
        with self._uow_factory() as uow:
            try:
                uow.reservations.transition(
                    reservation.id, ReservationStatus.RESERVED, ReservationStatus.EXPIRED
                )
                StockLedger(uow.inventory).release(reservation.product_id, reservation.quantity)
                uow.commit()
            except StaleStateError as exc:
                # Someone else (a confirm or a parallel sweep) got there first.
                logger.debug("Skipping reservation '%s': %s", reservation.id, exc)
                return False

        logger.info(
            "Reservation '%s' (order %s) expired; released %d of product '%s'",
            reservation.id, reservation.order_id, reservation.quantity, reservation.product_id,
        )
        return True
