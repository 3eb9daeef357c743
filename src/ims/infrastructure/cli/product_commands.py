"""CLI commands for products."""

from __future__ import annotations

import click

from ims.application.add_product import AddProductHandler
from ims.domain.exceptions import DomainException
from ims.infrastructure.bootstrap import unit_of_work_factory
from ims.infrastructure.cli.errors import fail


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--stock", required=True, type=int, help="Initial quantity in stock.")
def product_add(name: str, stock: int) -> None:
    """Add a new product with its initial stock."""
    handler = AddProductHandler(uow_factory=unit_of_work_factory())

    try:
        dto = handler.handle(name=name, initial_stock=stock)
    except DomainException as exc:
        raise fail(exc)

    click.echo(f"Product {dto.product_id} '{dto.name}' added with {stock} in stock")


@click.command("list")
def product_list() -> None:
    """List all products."""
    with unit_of_work_factory()() as uow:
        products = sorted(uow.products.list_all(), key=lambda p: p.name.lower())

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<10} {'Name':<20}")
    click.echo("-" * 31)
    for p in products:
        click.echo(f"{p.id:<10} {p.name:<20}")
