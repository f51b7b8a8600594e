"""JSON payloads for the sale-return endpoints."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Tuple

from ..common.datetime_utils import format_iso
from ..common.money import line_subtotal, money_str, total_of
from ..common.validators import (
    require_int,
    require_max_length,
    require_money_in_range,
    require_non_empty,
    require_non_empty_list,
    require_non_negative_decimal,
    require_optional_str,
    require_positive_int,
)
from ..core.constants import MAX_REASON_LENGTH
from ..core.exceptions import ValidationError
from .model import SaleReturn, SaleReturnItem


@dataclass(frozen=True)
class SaleReturnItemData:
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Optional[Decimal] = None

    @classmethod
    def from_json(cls, raw: Any, *, index: int) -> "SaleReturnItemData":
        if not isinstance(raw, dict):
            raise ValidationError(f"items[{index}] must be an object")
        subtotal = raw.get("subtotal")
        quantity = require_positive_int(raw.get("quantity"), f"items[{index}].quantity")
        unit_price = require_non_negative_decimal(raw.get("unitPrice"), f"items[{index}].unitPrice")
        require_money_in_range(unit_price * quantity, f"items[{index}] quantity x unitPrice")
        return cls(
            product_id=require_int(raw.get("productId"), f"items[{index}].productId"),
            quantity=quantity,
            unit_price=unit_price,
            subtotal=(
                require_non_negative_decimal(subtotal, f"items[{index}].subtotal") if subtotal is not None else None
            ),
        )


@dataclass(frozen=True)
class SaleReturnData:
    """Create/update request for a sale return.

    ``total_return_amount`` is accepted for compatibility but the stored total
    is always recomputed from the item subtotals.
    """

    original_sale_id: int
    customer_id: int
    employee_id: int
    reason: str
    items: Tuple[SaleReturnItemData, ...]
    total_return_amount: Optional[Decimal] = None

    @classmethod
    def from_json(cls, payload: Any) -> "SaleReturnData":
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        raw_items = require_non_empty_list(payload.get("items"), "items")
        reason = require_non_empty(require_optional_str(payload.get("reason"), "reason") or "", "reason")
        items = tuple(SaleReturnItemData.from_json(raw, index=i) for i, raw in enumerate(raw_items))
        require_money_in_range(total_of(line_subtotal(i.quantity, i.unit_price) for i in items), "totalReturnAmount")
        total = payload.get("totalReturnAmount")

        return cls(
            original_sale_id=require_int(payload.get("originalSaleId"), "originalSaleId"),
            customer_id=require_int(payload.get("customerId"), "customerId"),
            employee_id=require_int(payload.get("employeeId"), "employeeId"),
            reason=require_max_length(reason, "reason", MAX_REASON_LENGTH),
            items=items,
            total_return_amount=(
                require_non_negative_decimal(total, "totalReturnAmount") if total is not None else None
            ),
        )


def sale_return_item_to_json(item: SaleReturnItem) -> dict:
    return {
        "id": item.item_id,
        "productId": item.product_id,
        "productName": item.product_name,
        "quantity": item.quantity,
        "unitPrice": money_str(item.unit_price),
        "subtotal": money_str(item.subtotal),
    }


def sale_return_to_json(sale_return: SaleReturn) -> dict:
    return {
        "id": sale_return.return_id,
        "originalSaleId": sale_return.original_sale_id,
        "customerId": sale_return.customer_id,
        "employeeId": sale_return.employee_id,
        "totalReturnAmount": money_str(sale_return.total_return_amount),
        "reason": sale_return.reason,
        "items": [sale_return_item_to_json(i) for i in sale_return.items],
        "createdAt": format_iso(sale_return.created_at),
        "updatedAt": format_iso(sale_return.updated_at),
    }
