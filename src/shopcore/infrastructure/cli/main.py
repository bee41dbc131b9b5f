import click

from shopcore.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_merge,
    cart_remove,
    cart_show,
    cart_update,
)
from shopcore.infrastructure.cli.order_commands import (
    order_adjust,
    order_payment,
    order_place,
    order_quote,
    order_show,
    order_status,
)
from shopcore.infrastructure.cli.product_commands import (
    product_add,
    product_deactivate,
    product_list,
    product_set_stock,
    product_update,
    variant_add,
    variant_list,
)
from shopcore.infrastructure.config import Settings
from shopcore.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log at INFO level.")
def cli(verbose: bool) -> None:
    """shopcore: carts, checkout and orders"""
    settings = Settings.from_env()
    configure_logging("INFO" if verbose else settings.log_level)


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def variant() -> None:
    """Manage product variants."""


@cli.group()
def cart() -> None:
    """Manage shopping carts."""


@cli.group()
def order() -> None:
    """Check out and manage orders."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_deactivate)
product.add_command(product_list)
product.add_command(product_set_stock)
product.add_command(product_update)
variant.add_command(variant_add)
variant.add_command(variant_list)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_merge)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_adjust)
order.add_command(order_payment)
order.add_command(order_place)
order.add_command(order_quote)
order.add_command(order_show)
order.add_command(order_status)
