"""CLI commands for shopping carts."""

from __future__ import annotations

import click

from shopcore.application.add_cart_item import AddCartItemHandler
from shopcore.application.dto import CartDTO
from shopcore.application.merge_carts import MergeCartsHandler
from shopcore.application.remove_cart_item import ClearCartHandler, RemoveCartItemHandler
from shopcore.application.show_cart import ShowCartHandler
from shopcore.application.update_cart_item import UpdateCartItemHandler
from shopcore.domain.exceptions import DomainException
from shopcore.domain.model.value_objects import CartOwner
from shopcore.infrastructure.bootstrap import unit_of_work
from shopcore.infrastructure.cli.options import owner_options, parse_attributes


def _display_cart(dto: CartDTO) -> None:
    click.echo(f"Cart for {dto.owner}")
    if not dto.items:
        click.echo("  (empty)")
        return

    click.echo(f"  {'Line':<6} {'Product':<10} {'Variant':<10} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        flag = "" if item.available else "  (unavailable)"
        click.echo(
            f"  {item.id:<6} {item.product_id:<10} {item.variant_id or '-':<10} "
            f"{item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}{flag}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Subtotal':<34} {dto.subtotal:>20}")
    click.echo(f"  Items: {dto.item_count}")


@click.command("add")
@owner_options
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID.")
@click.option("--quantity", default=1, type=int, help="Quantity to add.")
@click.option("--price", default=None, help="Explicit unit price to snapshot.")
@click.option("--attr", "attrs", multiple=True, help="Attribute as key=value.")
def cart_add(
    owner: CartOwner,
    product_id: str,
    variant_id: str | None,
    quantity: int,
    price: str | None,
    attrs: tuple[str, ...],
) -> None:
    """Add an item to a cart (merges with an existing line)."""
    handler = AddCartItemHandler(unit_of_work())

    try:
        line = handler.handle(
            owner=owner,
            product_id=product_id,
            quantity=quantity,
            variant_id=variant_id,
            price=price,
            attributes=parse_attributes(attrs) or None,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Cart line #{line.id}: {line.quantity} x {line.unit_price} = {line.line_total}"
    )


@click.command("update")
@owner_options
@click.option("--line", "line_id", required=True, type=int, help="Cart line ID.")
@click.option("--quantity", required=True, type=int, help="New quantity.")
def cart_update(owner: CartOwner, line_id: int, quantity: int) -> None:
    """Change the quantity of a cart line."""
    handler = UpdateCartItemHandler(unit_of_work())

    try:
        line = handler.handle(line_id=line_id, quantity=quantity, owner=owner)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart line #{line.id} now has quantity {line.quantity}")


@click.command("remove")
@owner_options
@click.option("--line", "line_id", required=True, type=int, help="Cart line ID.")
def cart_remove(owner: CartOwner, line_id: int) -> None:
    """Remove a line from a cart."""
    handler = RemoveCartItemHandler(unit_of_work())

    try:
        handler.handle(line_id=line_id, owner=owner)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart line #{line_id} removed.")


@click.command("clear")
@owner_options
def cart_clear(owner: CartOwner) -> None:
    """Remove every line from a cart."""
    handler = ClearCartHandler(unit_of_work())

    try:
        removed = handler.handle(owner)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart for {owner} cleared ({removed} line(s) removed).")


@click.command("show")
@owner_options
def cart_show(owner: CartOwner) -> None:
    """Show a cart with totals and availability."""
    _display_cart(ShowCartHandler(unit_of_work()).handle(owner))


@click.command("merge")
@click.option("--session", "session_id", required=True, help="Guest session token.")
@click.option("--user", "user_id", required=True, help="User ID that logged in.")
def cart_merge(session_id: str, user_id: str) -> None:
    """Move a guest cart into a user's cart."""
    handler = MergeCartsHandler(unit_of_work())

    try:
        dto = handler.handle(session_id=session_id, user_id=user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)
