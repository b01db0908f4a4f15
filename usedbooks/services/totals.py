# usedbooks/services/totals.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable

from usedbooks.utils.settings import TAX_RATE

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    grand_total: Decimal

    def as_dict(self) -> Dict[str, Decimal]:
        return {
            "subtotal": self.subtotal,
            "tax": self.tax,
            "grand_total": self.grand_total,
        }


def _money(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute_totals(items: Iterable[Any], tax_rate: Decimal = TAX_RATE) -> Totals:
    """
    Sumy koszyka: subtotal = suma(price * quantity), tax = 7% zaokraglone
    do centow, grand total = subtotal + tax zaokraglone do centow.
    Pusty koszyk -> same zera.
    """
    subtotal = sum((_money(i.price) * i.quantity for i in items), ZERO)
    tax = (subtotal * tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)
    grand_total = (subtotal + tax).quantize(CENT, rounding=ROUND_HALF_UP)
    return Totals(subtotal=subtotal, tax=tax, grand_total=grand_total)


def cart_count(items: Iterable[Any]) -> int:
    return sum(i.quantity for i in items)
