"""Abstract repository for Reservation aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ims.domain.model.reservation import Reservation, ReservationStatus


class ReservationRepository(ABC):

    @abstractmethod
    def add(self, reservation: Reservation) -> None:
        """Stage a new RESERVED row.  A reused id raises DuplicateIdentifierError."""

    @abstractmethod
    def get_by_order_id(self, order_id: str) -> Reservation | None:
        """Return the reservation created for an order id, or None."""

    @abstractmethod
    def transition(
        self,
        reservation_id: str,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
    ) -> Reservation:
        """Move a reservation from ``from_status`` to ``to_status``.

        Raises StaleStateError when the current status is not
        ``from_status``; the check is repeated at commit time.
        """

    @abstractmethod
    def find_due(self, now: datetime) -> list[Reservation]:
        """Return RESERVED rows whose ``expires_at`` is before *now*."""
