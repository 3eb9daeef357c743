"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any other transport) and the
application layer without exposing domain internals such as the
inventory version.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProductDTO:

    product_id: str
    name: str


@dataclass(frozen=True)
class StockUpdateDTO:

    product_id: str
    message: str
    delta: int
    new_total: int


@dataclass(frozen=True)
class StockDTO:

    product_id: str
    name: str
    available_stock: int


@dataclass(frozen=True)
class ReservationDTO:
    """Output of a successful reserve; ``expires_at`` is ISO-8601."""

    reservation_id: str
    order_id: str
    product_id: str
    quantity: int
    expires_at: str
    status: str


@dataclass(frozen=True)
class OrderDTO:

    order_id: str
    status: str
