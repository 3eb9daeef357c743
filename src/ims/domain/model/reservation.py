"""Reservation aggregate — a time-bounded hold on stock.

A reservation is created RESERVED and moves to exactly one terminal
state: CONFIRMED (explicit confirm before the deadline) or EXPIRED
(swept after the deadline).  Terminal reservations never change again.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from ims.domain.exceptions import ValidationError
from ims.domain.model.value_objects import Quantity, new_identifier

DEFAULT_HOLD = timedelta(minutes=10)


class ReservationStatus(Enum):
    RESERVED = "RESERVED"
    CONFIRMED = "CONFIRMED"
    EXPIRED = "EXPIRED"


# Only RESERVED may move, and only to a terminal state.
_LEGAL_TRANSITIONS = {
    ReservationStatus.RESERVED: {ReservationStatus.CONFIRMED, ReservationStatus.EXPIRED},
    ReservationStatus.CONFIRMED: set(),
    ReservationStatus.EXPIRED: set(),
}


@dataclass
class Reservation:

    id: str
    order_id: str
    product_id: str
    quantity: int
    status: ReservationStatus
    expires_at: datetime
    created_at: datetime

    # --- Factory (used for NEW reservations only) -----------------------------

    @staticmethod
    def create(
        product_id: str,
        quantity: int,
        now: datetime,
        hold: timedelta = DEFAULT_HOLD,
        order_id: str | None = None,
    ) -> Reservation:
        return Reservation(
            id=new_identifier(),
            order_id=order_id or new_identifier(),
            product_id=product_id,
            quantity=Quantity(quantity).value,
            status=ReservationStatus.RESERVED,
            expires_at=now + hold,
            created_at=now,
        )

    # --- Queries --------------------------------------------------------------

    def is_due(self, now: datetime) -> bool:
        """True once the hold deadline has strictly passed while RESERVED."""
        return self.status == ReservationStatus.RESERVED and self.expires_at < now

    # --- State transitions ----------------------------------------------------

    def transition_to(self, status: ReservationStatus) -> None:
        if status not in _LEGAL_TRANSITIONS[self.status]:
            raise ValidationError(
                f"Cannot move reservation from {self.status.value} to {status.value}"
            )
        self.status = status
