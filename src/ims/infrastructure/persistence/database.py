"""Committed state shared by every unit of work.

The tables hold the last committed copy of every row.  Units of work
never hand these objects out: they copy on read and replace on commit,
always while holding ``lock``.  Refreshing the tables and committing go
through ``transaction()``, which a file-backed store widens to an
exclusive lock that other processes respect too.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from ims.domain.model.inventory import Inventory
from ims.domain.model.order import Order
from ims.domain.model.product import Product
from ims.domain.model.reservation import Reservation


class InMemoryDatabase:

    def __init__(
        self,
        products: list[Product] | None = None,
        inventory: list[Inventory] | None = None,
        reservations: list[Reservation] | None = None,
        orders: list[Order] | None = None,
    ) -> None:
        self.lock = threading.RLock()
        self.products: dict[str, Product] = {p.id: p for p in products or []}
        self.inventory: dict[str, Inventory] = {i.product_id: i for i in inventory or []}
        self.reservations: dict[str, Reservation] = {r.id: r for r in reservations or []}
        self.orders: dict[str, Order] = {o.id: o for o in orders or []}

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Exclusive access for a load, or a load-check-apply-flush commit."""
        with self.lock:
            yield

    def load(self) -> None:
        """Refresh the tables from backing storage (nothing to do in memory)."""

    def flush(self) -> None:
        """Persist the tables to backing storage (nothing to do in memory)."""
