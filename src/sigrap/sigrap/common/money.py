from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..core.constants import MONEY_PLACES

ZERO = Decimal("0")
_QUANT = Decimal(1).scaleb(-MONEY_PLACES)


def quantize(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(_QUANT, rounding=ROUND_HALF_UP)


def line_subtotal(quantity: int, unit_price: Decimal) -> Decimal:
    """quantity x unit price, never below zero."""
    subtotal = quantize(unit_price * quantity)
    return subtotal if subtotal > ZERO else quantize(ZERO)


def total_of(subtotals: Iterable[Decimal]) -> Decimal:
    return quantize(sum(subtotals, ZERO))


def money_str(amount: Decimal) -> str:
    return str(quantize(amount))
