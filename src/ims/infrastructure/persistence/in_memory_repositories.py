"""Repositories over an InMemoryDatabase with per-unit-of-work staging.

Reads return copies of committed rows overlaid with whatever the current
unit of work has staged.  Writes are only staged; ``check()`` re-validates
the staged preconditions against the committed tables and ``apply()``
writes them.  The unit of work calls both under the database lock.
"""

from __future__ import annotations

import copy
from datetime import datetime

from ims.domain.exceptions import (
    ConcurrentModificationError,
    ConflictError,
    DuplicateIdentifierError,
    NotFoundError,
    StaleStateError,
)
from ims.domain.model.inventory import Inventory
from ims.domain.model.order import Order
from ims.domain.model.product import Product
from ims.domain.model.reservation import Reservation, ReservationStatus
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.order_repository import OrderRepository
from ims.domain.repository.product_repository import ProductRepository
from ims.domain.repository.reservation_repository import ReservationRepository
from ims.infrastructure.persistence.database import InMemoryDatabase


class InMemoryProductRepository(ProductRepository):

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db
        self._new: dict[str, Product] = {}

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._view().get(product_id)

    def get_by_name(self, name: str) -> Product | None:
        for p in self._view().values():
            if p.name.lower() == name.strip().lower():
                return p
        return None

    def list_all(self) -> list[Product]:
        return list(self._view().values())

    def add(self, product: Product) -> None:
        if self.get_by_id(product.id) is not None:
            raise ConflictError(f"Product '{product.id}' already exists")
        if self.get_by_name(product.name) is not None:
            raise ConflictError(f"Product with name '{product.name}' already exists")
        self._new[product.id] = product

    # --- Staging --------------------------------------------------------------

    def check(self) -> None:
        taken = {p.name.lower() for p in self._db.products.values()}
        for product in self._new.values():
            if product.id in self._db.products or product.name.lower() in taken:
                raise ConflictError(f"Product with name '{product.name}' already exists")

    def apply(self) -> None:
        self._db.products.update(self._new)

    def reset(self) -> None:
        self._new.clear()

    def _view(self) -> dict[str, Product]:
        with self._db.lock:
            view = dict(self._db.products)
        view.update(self._new)
        return view


class InMemoryInventoryRepository(InventoryRepository):

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db
        self._new: dict[str, Inventory] = {}
        # product_id -> (staged row, version the committed row must still have)
        self._updates: dict[str, tuple[Inventory, int]] = {}

    # --- InventoryRepository interface ----------------------------------------

    def get_by_product_id(self, product_id: str) -> Inventory | None:
        item = self._current(product_id)
        return copy.copy(item) if item is not None else None

    def list_all(self) -> list[Inventory]:
        with self._db.lock:
            ids = set(self._db.inventory)
        ids.update(self._new)
        return [self.get_by_product_id(pid) for pid in sorted(ids)]

    def add(self, item: Inventory) -> None:
        if self._current(item.product_id) is not None:
            raise ConflictError(f"Inventory for product '{item.product_id}' already exists")
        self._new[item.product_id] = copy.copy(item)

    def save(self, item: Inventory, expected_version: int) -> None:
        current = self._current(item.product_id)
        if current is None:
            raise NotFoundError(f"No inventory record for product '{item.product_id}'")
        if current.version != expected_version:
            raise ConcurrentModificationError(
                "Inventory", item.product_id, expected_version, current.version
            )

        item.version = expected_version + 1
        staged = copy.copy(item)
        if item.product_id in self._new:
            self._new[item.product_id] = staged
        elif item.product_id in self._updates:
            _, base_version = self._updates[item.product_id]
            self._updates[item.product_id] = (staged, base_version)
        else:
            self._updates[item.product_id] = (staged, expected_version)

    # --- Staging --------------------------------------------------------------

    def check(self) -> None:
        for product_id in self._new:
            if product_id in self._db.inventory:
                raise ConflictError(f"Inventory for product '{product_id}' already exists")
        for product_id, (_, base_version) in self._updates.items():
            committed = self._db.inventory.get(product_id)
            actual = committed.version if committed is not None else None
            if actual != base_version:
                raise ConcurrentModificationError("Inventory", product_id, base_version, actual)

    def apply(self) -> None:
        self._db.inventory.update(self._new)
        for product_id, (item, _) in self._updates.items():
            self._db.inventory[product_id] = item

    def reset(self) -> None:
        self._new.clear()
        self._updates.clear()

    def _current(self, product_id: str) -> Inventory | None:
        if product_id in self._new:
            return self._new[product_id]
        if product_id in self._updates:
            return self._updates[product_id][0]
        with self._db.lock:
            return self._db.inventory.get(product_id)


class InMemoryReservationRepository(ReservationRepository):

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db
        self._new: dict[str, Reservation] = {}
        # reservation_id -> (staged row, status the committed row must still have)
        self._transitions: dict[str, tuple[Reservation, ReservationStatus]] = {}

    # --- ReservationRepository interface --------------------------------------

    def add(self, reservation: Reservation) -> None:
        if self._current(reservation.id) is not None:
            raise DuplicateIdentifierError(f"Reservation id '{reservation.id}' is already in use")
        if self.get_by_order_id(reservation.order_id) is not None:
            raise DuplicateIdentifierError(f"Order id '{reservation.order_id}' is already in use")
        self._new[reservation.id] = copy.copy(reservation)

    def get_by_order_id(self, order_id: str) -> Reservation | None:
        for r in self._view():
            if r.order_id == order_id:
                return r
        return None

    def transition(
        self,
        reservation_id: str,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
    ) -> Reservation:
        current = self._current(reservation_id)
        if current is None:
            raise NotFoundError(f"Reservation '{reservation_id}' not found")
        if current.status != from_status:
            raise StaleStateError(reservation_id, from_status, current.status)

        staged = copy.copy(current)
        staged.transition_to(to_status)
        if reservation_id in self._new:
            self._new[reservation_id] = staged
        elif reservation_id in self._transitions:
            _, base_status = self._transitions[reservation_id]
            self._transitions[reservation_id] = (staged, base_status)
        else:
            self._transitions[reservation_id] = (staged, from_status)
        return copy.copy(staged)

    def find_due(self, now: datetime) -> list[Reservation]:
        return [r for r in self._view() if r.is_due(now)]

    # --- Staging --------------------------------------------------------------

    def check(self) -> None:
        committed_order_ids = {r.order_id for r in self._db.reservations.values()}
        for reservation in self._new.values():
            if reservation.id in self._db.reservations or reservation.order_id in committed_order_ids:
                raise DuplicateIdentifierError(f"Order id '{reservation.order_id}' is already in use")
        for reservation_id, (_, base_status) in self._transitions.items():
            committed = self._db.reservations[reservation_id]
            if committed.status != base_status:
                raise StaleStateError(reservation_id, base_status, committed.status)

    def apply(self) -> None:
        self._db.reservations.update(self._new)
        for reservation_id, (reservation, _) in self._transitions.items():
            self._db.reservations[reservation_id] = reservation

    def reset(self) -> None:
        self._new.clear()
        self._transitions.clear()

    def _current(self, reservation_id: str) -> Reservation | None:
        if reservation_id in self._new:
            return self._new[reservation_id]
        if reservation_id in self._transitions:
            return self._transitions[reservation_id][0]
        with self._db.lock:
            return self._db.reservations.get(reservation_id)

    def _view(self) -> list[Reservation]:
        with self._db.lock:
            view = dict(self._db.reservations)
        view.update({rid: staged for rid, (staged, _) in self._transitions.items()})
        view.update(self._new)
        return [copy.copy(r) for r in view.values()]


class InMemoryOrderRepository(OrderRepository):

    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db
        self._new: dict[str, Order] = {}

    def get_by_id(self, order_id: str) -> Order | None:
        if order_id in self._new:
            return self._new[order_id]
        with self._db.lock:
            return self._db.orders.get(order_id)

    def add(self, order: Order) -> None:
        if self.get_by_id(order.id) is not None:
            raise ConflictError(f"Order '{order.id}' already exists")
        self._new[order.id] = order

    def check(self) -> None:
        for order_id in self._new:
            if order_id in self._db.orders:
                raise ConflictError(f"Order '{order_id}' already exists")

    def apply(self) -> None:
        self._db.orders.update(self._new)

    def reset(self) -> None:
        self._new.clear()
