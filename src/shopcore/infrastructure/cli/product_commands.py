"""CLI commands for catalog management (products and variants)."""

from __future__ import annotations

import click

from shopcore.application.add_product import AddProductHandler, AddVariantHandler
from shopcore.application.set_stock import SetStockHandler
from shopcore.application.update_product import UpdateProductHandler
from shopcore.domain.exceptions import DomainException
from shopcore.infrastructure.bootstrap import unit_of_work
from shopcore.infrastructure.cli.options import parse_attributes


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--sku", required=True, help="Unique SKU.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--quantity", default=0, type=int, help="Quantity on hand.")
@click.option("--untracked", is_flag=True, default=False, help="Do not track stock.")
@click.option("--compare-at", "compare_at", default=None, help="Compare-at price.")
@click.option("--weight", default=None, help="Shipping weight.")
def product_add(
    name: str,
    sku: str,
    price: str,
    quantity: int,
    untracked: bool,
    compare_at: str | None,
    weight: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(unit_of_work())

    try:
        product = handler.handle(
            name=name,
            sku=sku,
            price=price,
            quantity=quantity,
            track_quantity=not untracked,
            compare_at_price=compare_at,
            weight=weight,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' ({product.sku}) added at {product.price}")


@click.command("list")
def product_list() -> None:
    """List all products and their variants."""
    with unit_of_work() as uow:
        products = uow.products.list_all()
        variants = {p.id: uow.variants.list_for_product(p.id) for p in products}

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'SKU':<16} {'Name':<20} {'Price':>10} {'Stock':>7} {'Active':>7}")
    click.echo("-" * 71)
    for p in products:
        stock = str(p.quantity) if p.track_quantity else "-"
        click.echo(
            f"{p.id:<6} {p.sku:<16} {p.name:<20} {str(p.price):>10} "
            f"{stock:>7} {'yes' if p.is_active else 'no':>7}"
        )
        for v in variants[p.id]:
            click.echo(
                f"  {v.id:<4} {v.sku:<16} {v.name:<20} {str(v.price):>10} {v.quantity:>7}"
            )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--name", default=None, help="New name (slug is regenerated).")
@click.option("--slug", default=None, help="Explicit slug to use with --name.")
def product_update(
    product_id: str,
    price: str | None,
    name: str | None,
    slug: str | None,
) -> None:
    """Update a product's price and/or name."""
    if price is None and name is None:
        raise click.UsageError("Nothing to update: give --price and/or --name.")

    handler = UpdateProductHandler(unit_of_work())

    try:
        product = handler.handle(
            product_id=product_id, new_price=price, new_name=name, new_slug=slug
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} updated: '{product.name}' at {product.price}")


@click.command("deactivate")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_deactivate(product_id: str) -> None:
    """Take a product off sale."""
    handler = UpdateProductHandler(unit_of_work())

    try:
        handler.handle(product_id=product_id, deactivate=True)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} deactivated.")


@click.command("set-stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID.")
@click.option("--quantity", required=True, type=int, help="Quantity on hand.")
def product_set_stock(product_id: str, variant_id: str | None, quantity: int) -> None:
    """Set stock for a product or one of its variants."""
    handler = SetStockHandler(unit_of_work())

    try:
        handler.handle(product_id=product_id, quantity=quantity, variant_id=variant_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    target = f"variant #{variant_id}" if variant_id else f"product #{product_id}"
    click.echo(f"Stock for {target} set to {quantity}")


@click.command("add")
@click.option("--product", "product_id", required=True, help="Parent product ID.")
@click.option("--name", required=True, help="Variant name (e.g. 'Large Red').")
@click.option("--price", required=True, help="Variant price.")
@click.option("--quantity", default=0, type=int, help="Quantity on hand.")
@click.option("--sku", default=None, help="SKU (derived from the parent if omitted).")
@click.option("--attr", "attrs", multiple=True, help="Attribute as key=value.")
def variant_add(
    product_id: str,
    name: str,
    price: str,
    quantity: int,
    sku: str | None,
    attrs: tuple[str, ...],
) -> None:
    """Add a variant to a product."""
    handler = AddVariantHandler(unit_of_work())

    try:
        variant = handler.handle(
            product_id=product_id,
            name=name,
            price=price,
            quantity=quantity,
            sku=sku,
            attributes=parse_attributes(attrs),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Variant #{variant.id} '{variant.name}' ({variant.sku}) added at {variant.price}")


@click.command("list")
@click.option("--product", "product_id", required=True, help="Parent product ID.")
def variant_list(product_id: str) -> None:
    """List the variants of a product."""
    with unit_of_work() as uow:
        variants = uow.variants.list_for_product(product_id)

    if not variants:
        click.echo(f"No variants found for product #{product_id}.")
        return

    click.echo(f"{'ID':<6} {'SKU':<24} {'Name':<20} {'Price':>10} {'Stock':>7}  Attributes")
    click.echo("-" * 80)
    for v in variants:
        attrs = ", ".join(f"{k}={val}" for k, val in v.attributes.items())
        click.echo(
            f"{v.id:<6} {v.sku:<24} {v.name:<20} {str(v.price):>10} {v.quantity:>7}  {attrs}"
        )
