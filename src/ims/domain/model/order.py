"""Order record — a committed sale.

Orders only come into existence as the side effect of confirming a
reservation.  They reuse the reservation's order id and are never
mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class Order:

    id: str
    product_id: str
    quantity: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
