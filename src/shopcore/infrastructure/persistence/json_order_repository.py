"""JSON-backed implementation of OrderRepository.

An order and its items are one record, so they are always written
together.
"""

from __future__ import annotations

from datetime import datetime

from shopcore.domain.model.order import Order, OrderItem, OrderStatus, PaymentStatus
from shopcore.domain.model.value_objects import Attributes, Quantity
from shopcore.domain.repository.order_repository import OrderRepository
from shopcore.infrastructure.persistence.serialization import (
    decimal_from_raw,
    decimal_to_raw,
    money_from_raw,
    money_to_raw,
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(o["id"] for o in self._records) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._records:
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_number(self, order_number: str) -> Order | None:
        for raw in self._records:
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()

        # Upsert: replace if exists, otherwise append
        for i, raw in enumerate(self._records):
            if raw["id"] == order.id:
                self._records[i] = self._to_raw(order)
                return
        self._records.append(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "customer_id": order.customer_id,
            "status": order.status.value,
            "payment_status": order.payment_status.value,
            "payment_method": order.payment_method,
            "shipping_method": order.shipping_method,
            "currency": order.currency,
            "subtotal": money_to_raw(order.subtotal),
            "tax_amount": money_to_raw(order.tax_amount),
            "shipping_amount": money_to_raw(order.shipping_amount),
            "discount_amount": money_to_raw(order.discount_amount),
            "total": money_to_raw(order.total),
            "notes": order.notes,
            "tracking_number": order.tracking_number,
            "shipped_at": order.shipped_at.isoformat() if order.shipped_at else None,
            "delivered_at": order.delivered_at.isoformat() if order.delivered_at else None,
            "created_at": order.created_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "product_name": item.product_name,
                    "variant_name": item.variant_name,
                    "sku": item.sku,
                    "quantity": item.quantity.value,
                    "unit_price": money_to_raw(item.unit_price),
                    "total": money_to_raw(item.total),
                    "weight": decimal_to_raw(item.weight),
                    "attributes": item.attributes.as_dict(),
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")
        items = tuple(
            OrderItem(
                product_id=i["product_id"],
                variant_id=i.get("variant_id"),
                product_name=i["product_name"],
                variant_name=i.get("variant_name"),
                sku=i["sku"],
                quantity=Quantity(i["quantity"]),
                unit_price=money_from_raw(i["unit_price"], currency),
                total=money_from_raw(i["total"], currency),
                weight=decimal_from_raw(i.get("weight")),
                attributes=Attributes.of(i.get("attributes")),
            )
            for i in raw["items"]
        )
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            customer_id=raw.get("customer_id"),
            items=items,
            subtotal=money_from_raw(raw["subtotal"], currency),
            tax_amount=money_from_raw(raw["tax_amount"], currency),
            shipping_amount=money_from_raw(raw["shipping_amount"], currency),
            discount_amount=money_from_raw(raw["discount_amount"], currency),
            total=money_from_raw(raw["total"], currency),
            currency=currency,
            status=OrderStatus(raw["status"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            payment_method=raw.get("payment_method"),
            shipping_method=raw.get("shipping_method"),
            notes=raw.get("notes"),
            tracking_number=raw.get("tracking_number"),
            shipped_at=_parse_dt(raw.get("shipped_at")),
            delivered_at=_parse_dt(raw.get("delivered_at")),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )


def _parse_dt(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw else None
