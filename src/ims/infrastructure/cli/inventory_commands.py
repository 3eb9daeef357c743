"""CLI commands for stock levels."""

from __future__ import annotations

import click

from ims.application.add_stock import AddStockHandler
from ims.application.show_inventory import ShowInventoryHandler
from ims.application.show_stock import GetAvailableStockHandler
from ims.domain.exceptions import DomainException
from ims.infrastructure.bootstrap import settings, unit_of_work_factory
from ims.infrastructure.cli.errors import fail


@click.command("add")
@click.option("--product-id", required=True, help="Product ID.")
@click.option("--delta", required=True, type=int, help="Units to add.")
def stock_add(product_id: str, delta: int) -> None:
    """Restock a product."""
    handler = AddStockHandler(uow_factory=unit_of_work_factory(), settings=settings())

    try:
        dto = handler.handle(product_id=product_id, delta=delta)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"{dto.message}: +{dto.delta}, total is now {dto.new_total}")


@click.command("show")
@click.option("--product-id", required=True, help="Product ID.")
def stock_show(product_id: str) -> None:
    """Show the available stock of one product."""
    handler = GetAvailableStockHandler(uow_factory=unit_of_work_factory(), settings=settings())

    try:
        dto = handler.handle(product_id=product_id)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"{dto.name} ({dto.product_id}): {dto.available_stock} available")


@click.command("list")
def stock_list() -> None:
    """Show stock levels for every product."""
    handler = ShowInventoryHandler(uow_factory=unit_of_work_factory(), settings=settings())
    lines = handler.handle()

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'Product':<20} {'Total':>8} {'Held':>8} {'Available':>10}")
    click.echo("-" * 49)
    for line in lines:
        click.echo(
            f"{line.product_name:<20} {line.total:>8} {line.held:>8} {line.available:>10}"
        )
