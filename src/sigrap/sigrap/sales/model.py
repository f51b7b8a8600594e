from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple

from ..core.enums import PaymentMethod, SaleStatus
from ..inventory.reconciliation import allocation


@dataclass(frozen=True)
class SaleItem:
    """Domain entity: one product line of a sale."""

    item_id: int
    sale_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    product_name: Optional[str] = None


@dataclass(frozen=True)
class SaleHeader:
    """Writable header fields of a sale (everything except identity, items and timestamps)."""

    total_amount: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    customer_id: int
    employee_id: int
    payment_method: PaymentMethod = PaymentMethod.CASH
    status: SaleStatus = SaleStatus.COMPLETED
    notes: Optional[str] = None


@dataclass(frozen=True)
class Sale:
    """Domain aggregate: sale header plus its ordered line items."""

    sale_id: int
    total_amount: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    customer_id: int
    employee_id: int
    payment_method: PaymentMethod
    status: SaleStatus
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    items: Tuple[SaleItem, ...] = ()

    def quantities_by_product(self) -> Dict[int, int]:
        """Read-only lookup used when validating returns against this sale."""
        return allocation(self.items)

    def item_for_product(self, product_id: int) -> Optional[SaleItem]:
        for item in self.items:
            if item.product_id == int(product_id):
                return item
        return None
