"""JSON payloads for the sales endpoints (parsing in, rendering out)."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Tuple

from ..common.datetime_utils import format_iso
from ..common.money import ZERO, money_str
from ..common.validators import (
    require_int,
    require_max_length,
    require_money_in_range,
    require_non_empty_list,
    require_non_negative_decimal,
    require_optional_str,
    require_positive_int,
)
from ..core.constants import MAX_NOTES_LENGTH
from ..core.enums import PaymentMethod, SaleStatus
from ..core.exceptions import ValidationError
from .model import Sale, SaleItem


@dataclass(frozen=True)
class SaleItemData:
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Optional[Decimal] = None

    @classmethod
    def from_json(cls, raw: Any, *, index: int) -> "SaleItemData":
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


def _enum(enum_cls, value: Any, field_name: str, default=None):
    if value is None or value == "":
        return default
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


@dataclass(frozen=True)
class SaleData:
    """Create/update request for a sale."""

    total_amount: Decimal
    tax_amount: Decimal
    final_amount: Decimal
    employee_id: int
    items: Tuple[SaleItemData, ...]
    customer_id: Optional[int] = None
    discount_amount: Decimal = ZERO
    payment_method: PaymentMethod = PaymentMethod.CASH
    status: Optional[SaleStatus] = None
    notes: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Any) -> "SaleData":
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")

        raw_items = require_non_empty_list(payload.get("items"), "items")
        discount = payload.get("discountAmount")
        customer_id = payload.get("customerId")
        notes = require_max_length(require_optional_str(payload.get("notes"), "notes"), "notes", MAX_NOTES_LENGTH)

        return cls(
            total_amount=require_non_negative_decimal(payload.get("totalAmount"), "totalAmount"),
            tax_amount=require_non_negative_decimal(payload.get("taxAmount"), "taxAmount"),
            final_amount=require_non_negative_decimal(payload.get("finalAmount"), "finalAmount"),
            employee_id=require_int(payload.get("employeeId"), "employeeId"),
            items=tuple(SaleItemData.from_json(raw, index=i) for i, raw in enumerate(raw_items)),
            customer_id=require_int(customer_id, "customerId") if customer_id is not None else None,
            discount_amount=(
                require_non_negative_decimal(discount, "discountAmount") if discount is not None else ZERO
            ),
            payment_method=_enum(PaymentMethod, payload.get("paymentMethod"), "paymentMethod", PaymentMethod.CASH),
            status=_enum(SaleStatus, payload.get("status"), "status"),
            notes=notes,
        )


def sale_item_to_json(item: SaleItem) -> dict:
    return {
        "id": item.item_id,
        "productId": item.product_id,
        "productName": item.product_name,
        "quantity": item.quantity,
        "unitPrice": money_str(item.unit_price),
        "subtotal": money_str(item.subtotal),
    }


def sale_to_json(sale: Sale) -> dict:
    return {
        "id": sale.sale_id,
        "totalAmount": money_str(sale.total_amount),
        "taxAmount": money_str(sale.tax_amount),
        "discountAmount": money_str(sale.discount_amount),
        "finalAmount": money_str(sale.final_amount),
        "paymentMethod": sale.payment_method.value,
        "status": sale.status.value,
        "notes": sale.notes,
        "customerId": sale.customer_id,
        "employeeId": sale.employee_id,
        "items": [sale_item_to_json(i) for i in sale.items],
        "createdAt": format_iso(sale.created_at),
        "updatedAt": format_iso(sale.updated_at),
    }
