"""Helpers shared by the JSON repositories for value-object fields."""

from __future__ import annotations

from decimal import Decimal

from shopcore.domain.model.value_objects import Money


def money_to_raw(money: Money | None) -> str | None:
    return str(money.amount) if money is not None else None


def money_from_raw(raw: str | None, currency: str = "USD") -> Money | None:
    return Money(Decimal(raw), currency) if raw is not None else None


def decimal_to_raw(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def decimal_from_raw(raw: str | None) -> Decimal | None:
    return Decimal(raw) if raw is not None else None
