from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import SaleReturn


class SaleReturnRepository(Protocol):
    # Reads
    def get_by_id(self, return_id: int) -> Optional[SaleReturn]:
        raise NotImplementedError

    def exists(self, return_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[SaleReturn]:
        raise NotImplementedError

    def list_by_original_sale(self, sale_id: int) -> Sequence[SaleReturn]:
        raise NotImplementedError

    # Header writes
    def create(
        self,
        *,
        original_sale_id: int,
        customer_id: int,
        employee_id: int,
        reason: str,
        total_return_amount: Decimal,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        return_id: int,
        employee_id: int,
        reason: str,
        total_return_amount: Decimal,
    ) -> bool:
        """Only the mutable fields; original sale and customer are fixed."""

        raise NotImplementedError

    def delete(self, return_id: int) -> bool:
        raise NotImplementedError

    def delete_many(self, return_ids: Sequence[int]) -> int:
        raise NotImplementedError

    # Item writes
    def add_item(
        self,
        *,
        return_id: int,
        product_id: int,
        quantity: int,
        unit_price: Decimal,
        subtotal: Decimal,
    ) -> int:
        raise NotImplementedError

    def update_item(self, *, item_id: int, quantity: int, unit_price: Decimal, subtotal: Decimal) -> bool:
        raise NotImplementedError

    def delete_item(self, item_id: int) -> bool:
        raise NotImplementedError
