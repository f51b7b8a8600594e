from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Product:
    """Domain entity: a stocked product. ``stock`` never goes below zero."""

    product_id: int
    name: str
    stock: int
    sale_price: Decimal = Decimal("0")
    description: Optional[str] = None
