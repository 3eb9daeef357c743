"""JSON-file-backed database.

All four tables live in one document so a commit is a single atomic
file replace.  The file is re-read whenever a unit of work starts or
commits, so separate units of work (and separate CLI invocations) see
each other's committed writes.  ``store.json.lock`` serializes those
reads and commits across processes: without it a second process could
pass its checks against a stale copy and replace a newer file.
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

from filelock import FileLock

from ims.domain.model.inventory import Inventory
from ims.domain.model.order import Order
from ims.domain.model.product import Product
from ims.domain.model.reservation import Reservation, ReservationStatus
from ims.infrastructure.persistence.database import InMemoryDatabase


class JsonDatabase(InMemoryDatabase):

    def __init__(self, file_path: Path) -> None:
        super().__init__()
        self._file_path = file_path
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(f"{file_path}.lock")
        with self.transaction():
            self._ensure_file()
            self.load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    # --- InMemoryDatabase hooks -----------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self.lock, self._file_lock:
            yield

    def load(self) -> None:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        self.products = {
            r["id"]: self._product_to_domain(r) for r in raw.get("products", [])
        }
        self.inventory = {
            r["product_id"]: self._inventory_to_domain(r) for r in raw.get("inventory", [])
        }
        self.reservations = {
            r["id"]: self._reservation_to_domain(r) for r in raw.get("reservations", [])
        }
        self.orders = {r["id"]: self._order_to_domain(r) for r in raw.get("orders", [])}

    def flush(self) -> None:
        document = {
            "products": [self._product_to_raw(p) for p in self.products.values()],
            "inventory": [self._inventory_to_raw(i) for i in self.inventory.values()],
            "reservations": [self._reservation_to_raw(r) for r in self.reservations.values()],
            "orders": [self._order_to_raw(o) for o in self.orders.values()],
        }
        self._persist_raw(document)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _product_to_raw(product: Product) -> dict:
        return {"id": product.id, "name": product.name}

    @staticmethod
    def _product_to_domain(raw: dict) -> Product:
        return Product(id=raw["id"], name=raw["name"])

    @staticmethod
    def _inventory_to_raw(item: Inventory) -> dict:
        return {
            "product_id": item.product_id,
            "total_stock": item.total_stock,
            "available_stock": item.available_stock,
            "version": item.version,
            "updated_at": item.updated_at.isoformat(),
        }

    @staticmethod
    def _inventory_to_domain(raw: dict) -> Inventory:
        return Inventory(
            product_id=raw["product_id"],
            total_stock=raw["total_stock"],
            available_stock=raw["available_stock"],
            version=raw.get("version", 0),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    @staticmethod
    def _reservation_to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "order_id": reservation.order_id,
            "product_id": reservation.product_id,
            "quantity": reservation.quantity,
            "status": reservation.status.value,
            "expires_at": reservation.expires_at.isoformat(),
            "created_at": reservation.created_at.isoformat(),
        }

    @staticmethod
    def _reservation_to_domain(raw: dict) -> Reservation:
        return Reservation(
            id=raw["id"],
            order_id=raw["order_id"],
            product_id=raw["product_id"],
            quantity=raw["quantity"],
            status=ReservationStatus(raw["status"]),
            expires_at=datetime.fromisoformat(raw["expires_at"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    @staticmethod
    def _order_to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "product_id": order.product_id,
            "quantity": order.quantity,
            "created_at": order.created_at.isoformat(),
        }

    @staticmethod
    def _order_to_domain(raw: dict) -> Order:
        return Order(
            id=raw["id"],
            product_id=raw["product_id"],
            quantity=raw["quantity"],
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _persist_raw(self, document: dict) -> None:
        # Write beside the target and swap it in, so readers never see half a file.
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(document, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.write_text(
                json.dumps({"products": [], "inventory": [], "reservations": [], "orders": []}),
                encoding="utf-8",
            )
