from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from ..inventory.reconciliation import allocation


@dataclass(frozen=True)
class SaleReturnItem:
    item_id: int
    return_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    product_name: Optional[str] = None


@dataclass(frozen=True)
class SaleReturn:
    """Domain aggregate: products a customer brought back from one original sale.

    ``original_sale_id`` and ``customer_id`` never change after creation.
    """

    return_id: int
    original_sale_id: int
    customer_id: int
    employee_id: int
    total_return_amount: Decimal
    reason: str
    created_at: datetime
    updated_at: datetime
    items: Tuple[SaleReturnItem, ...] = ()

    def quantities_by_product(self) -> Dict[int, int]:
        return allocation(self.items)
