import logging

import click

from ims.infrastructure.cli.inventory_commands import stock_add, stock_list, stock_show
from ims.infrastructure.cli.order_commands import order_confirm, order_show, reserve, sweep
from ims.infrastructure.cli.product_commands import product_add, product_list
from ims.infrastructure.config import Config


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Overrides IMS_LOG_LEVEL.",
)
def cli(log_level: str | None) -> None:
    """IMS — Inventory reservation system"""
    logging.basicConfig(
        level=(log_level or Config.from_env().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def stock() -> None:
    """Manage stock levels."""


@cli.group()
def order() -> None:
    """Manage orders."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
stock.add_command(stock_add)
stock.add_command(stock_list)
stock.add_command(stock_show)
order.add_command(order_confirm)
order.add_command(order_show)
cli.add_command(reserve)
cli.add_command(sweep)
