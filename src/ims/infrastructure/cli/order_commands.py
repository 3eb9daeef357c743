"""CLI commands for reservations and orders."""

from __future__ import annotations

import click

from ims.application.confirm_order import ConfirmOrderHandler
from ims.application.reserve_stock import ReserveStockHandler
from ims.application.show_reservation import ShowReservationHandler
from ims.application.sweep_expired import SweepExpiredHandler
from ims.domain.exceptions import DomainException
from ims.infrastructure.bootstrap import settings, unit_of_work_factory
from ims.infrastructure.cli.errors import fail


@click.command("reserve")
@click.option("--product-id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to hold.")
def reserve(product_id: str, quantity: int) -> None:
    """Hold stock for a new order until it is confirmed or expires."""
    handler = ReserveStockHandler(uow_factory=unit_of_work_factory(), settings=settings())

    try:
        dto = handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Order {dto.order_id} reserved  (status={dto.status})")
    click.echo(f"Reservation: {dto.reservation_id}")
    click.echo(f"Product:     {dto.product_id} x {dto.quantity}")
    click.echo(f"Expires at:  {dto.expires_at}")


@click.command("confirm")
@click.option("--order-id", required=True, help="Order ID returned by reserve.")
def order_confirm(order_id: str) -> None:
    """Confirm a reserved order."""
    handler = ConfirmOrderHandler(uow_factory=unit_of_work_factory(), settings=settings())

    try:
        dto = handler.handle(order_id=order_id)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Order {dto.order_id} {dto.status.lower()}")


@click.command("show")
@click.option("--order-id", required=True, help="Order ID returned by reserve.")
def order_show(order_id: str) -> None:
    """Show a reservation and where it is in its lifecycle."""
    handler = ShowReservationHandler(uow_factory=unit_of_work_factory(), settings=settings())

    try:
        dto = handler.handle(order_id=order_id)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Order {dto.order_id}  (status={dto.status})")
    click.echo(f"Reservation: {dto.reservation_id}")
    click.echo(f"Product:     {dto.product_id} x {dto.quantity}")
    click.echo(f"Created:     {dto.created_at}")
    click.echo(f"Expires at:  {dto.expires_at}")
    if dto.has_order:
        click.echo("Order record created.")


@click.command("sweep")
def sweep() -> None:
    """Expire lapsed reservations now."""
    handler = SweepExpiredHandler(uow_factory=unit_of_work_factory(), settings=settings())

    try:
        expired = handler.handle()
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Expired {expired} reservation(s)")
