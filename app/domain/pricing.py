# app/domain/pricing.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from app.utils.settings import FLAT_SHIPPING_COST, FREE_SHIPPING_THRESHOLD, TAX_RATE

_UNIT = Decimal("1")


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    shipping_cost: Decimal
    total: Decimal

    @property
    def amount_for_free_shipping(self) -> Decimal:
        return max(Decimal("0"), FREE_SHIPPING_THRESHOLD - self.subtotal)


def round_amount(value: Decimal) -> Decimal:
    """Zaokraglenie do pelnej jednostki waluty, polowki w gore."""
    return value.quantize(_UNIT, rounding=ROUND_HALF_UP)


def shipping_cost_for(subtotal: Decimal) -> Decimal:
    return Decimal("0") if subtotal >= FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_COST


def compute_totals(lines: Iterable[Tuple[Decimal, int]]) -> OrderTotals:
    """
    lines: pary (cena jednostkowa, ilosc).

    tax = round(subtotal * TAX_RATE), total = round(subtotal + tax + shipping)
    """
    subtotal = sum((Decimal(price) * qty for price, qty in lines), Decimal("0"))
    tax = round_amount(subtotal * TAX_RATE)
    shipping = shipping_cost_for(subtotal)
    total = round_amount(subtotal + tax + shipping)
    return OrderTotals(subtotal=subtotal, tax=tax, shipping_cost=shipping, total=total)
