"""CLI commands for checkout and the Order aggregate."""

from __future__ import annotations

import click

from shopcore.application.adjust_order_amounts import AdjustOrderAmountsHandler
from shopcore.application.dto import OrderDTO, OrderItemDTO, OrderItemSpec
from shopcore.application.place_order import PlaceOrderHandler
from shopcore.application.quote_checkout import QuoteCheckoutHandler
from shopcore.application.show_order import ShowOrderHandler
from shopcore.application.update_order_status import (
    UpdateOrderStatusHandler,
    UpdatePaymentStatusHandler,
)
from shopcore.domain.exceptions import DomainException
from shopcore.domain.model.value_objects import CartOwner
from shopcore.infrastructure.bootstrap import unit_of_work
from shopcore.infrastructure.cli.options import owner_options


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '1:3,2:1:5' (product:qty[:variant]) into an OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        parts = [part.strip() for part in pair.strip().split(":")]
        if len(parts) not in (2, 3) or not parts[0]:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductID:Qty[:VariantID]'."
            )
        try:
            qty = int(parts[1])
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{parts[1]}' for product '{parts[0]}'."
            )
        variant_id = parts[2] if len(parts) == 3 and parts[2] else None
        specs.append(OrderItemSpec(product_id=parts[0], quantity=qty, variant_id=variant_id))
    return specs


def _display_items(items: list[OrderItemDTO]) -> None:
    click.echo(f"  {'Product':<28} {'SKU':<14} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*71}")
    for item in items:
        click.echo(
            f"  {item.product_name:<28} {item.sku:<14} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*71}")


def _display_totals(dto) -> None:
    click.echo(f"  {'Subtotal':<49} {dto.subtotal:>20}")
    click.echo(f"  {'Tax':<49} {dto.tax_amount:>20}")
    click.echo(f"  {'Shipping':<49} {dto.shipping_amount:>20}")
    click.echo(f"  {'Discount':<49} {'-' + dto.discount_amount:>20}")
    click.echo(f"  {'Order Total':<49} {dto.total:>20}")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number} (#{dto.id})")
    click.echo(f"Status:   {dto.status}  payment={dto.payment_status}")
    click.echo(f"Customer: {dto.customer_id or 'guest'}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.tracking_number:
        click.echo(f"Tracking: {dto.tracking_number}")
    click.echo()
    _display_items(dto.items)
    _display_totals(dto)


@click.command("quote")
@owner_options
@click.option("--items", "items_str", default=None, help="Items as 'ProductID:Qty[:VariantID],...'.")
@click.option("--tax", default="0", help="Tax amount.")
@click.option("--shipping", default="0", help="Shipping amount.")
@click.option("--discount", default="0", help="Discount amount.")
def order_quote(
    owner: CartOwner,
    items_str: str | None,
    tax: str,
    shipping: str,
    discount: str,
) -> None:
    """Price a checkout without placing the order."""
    handler = QuoteCheckoutHandler(unit_of_work())

    try:
        dto = handler.handle(
            owner,
            tax_amount=tax,
            shipping_amount=shipping,
            discount_amount=discount,
            items=_parse_items(items_str) if items_str else None,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Quote for {owner} ({dto.item_count} item(s))")
    click.echo()
    _display_items(dto.items)
    _display_totals(dto)


@click.command("place")
@owner_options
@click.option("--payment", "payment_method", required=True, help="Payment method.")
@click.option("--shipping-method", default=None, help="Shipping method.")
@click.option("--items", "items_str", default=None, help="Items as 'ProductID:Qty[:VariantID],...'.")
@click.option("--tax", default="0", help="Tax amount.")
@click.option("--shipping", default="0", help="Shipping amount.")
@click.option("--discount", default="0", help="Discount amount.")
@click.option("--number", "order_number", default=None, help="Explicit order number.")
@click.option("--notes", default=None, help="Order notes.")
def order_place(
    owner: CartOwner,
    payment_method: str,
    shipping_method: str | None,
    items_str: str | None,
    tax: str,
    shipping: str,
    discount: str,
    order_number: str | None,
    notes: str | None,
) -> None:
    """Place an order from the cart (or from --items)."""
    handler = PlaceOrderHandler(unit_of_work())

    try:
        dto = handler.handle(
            owner,
            payment_method=payment_method,
            shipping_method=shipping_method,
            tax_amount=tax,
            shipping_amount=shipping,
            discount_amount=discount,
            items=_parse_items(items_str) if items_str else None,
            order_number=order_number,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} placed (#{dto.id}, total {dto.total})")


@click.command("show")
@click.option("--id", "order_id", default=None, type=int, help="Order ID to display.")
@click.option("--number", "order_number", default=None, help="Order number to display.")
def order_show(order_id: int | None, order_number: str | None) -> None:
    """Show details of an existing order."""
    if order_id is None and not order_number:
        raise click.UsageError("Give --id or --number.")

    handler = ShowOrderHandler(unit_of_work())

    try:
        dto = handler.handle(order_id=order_id, order_number=order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--status", "new_status", required=True, help="New order status.")
@click.option("--tracking", default=None, help="Tracking number (when shipping).")
def order_status(order_id: int, new_status: str, tracking: str | None) -> None:
    """Move an order to a new status."""
    handler = UpdateOrderStatusHandler(unit_of_work())

    try:
        dto = handler.handle(order_id, new_status, tracking_number=tracking)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {dto.status}.")


@click.command("payment")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--status", "new_status", required=True, help="New payment status.")
def order_payment(order_id: int, new_status: str) -> None:
    """Record a payment status change."""
    handler = UpdatePaymentStatusHandler(unit_of_work())

    try:
        dto = handler.handle(order_id, new_status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} payment is now {dto.payment_status}.")


@click.command("adjust")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--tax", default=None, help="New tax amount.")
@click.option("--shipping", default=None, help="New shipping amount.")
@click.option("--discount", default=None, help="New discount amount.")
def order_adjust(
    order_id: int,
    tax: str | None,
    shipping: str | None,
    discount: str | None,
) -> None:
    """Correct tax, shipping or discount; the total is re-derived."""
    handler = AdjustOrderAmountsHandler(unit_of_work())

    try:
        dto = handler.handle(
            order_id, tax_amount=tax, shipping_amount=shipping, discount_amount=discount
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} total is now {dto.total}.")
