from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Protocol, Sequence

from .model import Sale, SaleHeader


class SaleRepository(Protocol):
    # Reads
    def get_by_id(self, sale_id: int) -> Optional[Sale]:
        """Sale with its items materialized (ordered by item id)."""

        raise NotImplementedError

    def exists(self, sale_id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Sale]:
        raise NotImplementedError

    def list_by_employee(self, employee_id: int) -> Sequence[Sale]:
        raise NotImplementedError

    def list_by_customer(self, customer_id: int) -> Sequence[Sale]:
        raise NotImplementedError

    def list_created_between(self, *, start: datetime, end: datetime) -> Sequence[Sale]:
        raise NotImplementedError

    def has_returns(self, sale_id: int) -> bool:
        raise NotImplementedError

    def returned_quantities(self, sale_id: int) -> Dict[int, int]:
        """Units already returned per product, summed over every return of the sale."""

        raise NotImplementedError

    # Writes
    def create(self, header: SaleHeader) -> int:
        raise NotImplementedError

    def update(self, sale_id: int, header: SaleHeader) -> bool:
        raise NotImplementedError

    def add_item(
        self,
        *,
        sale_id: int,
        product_id: int,
        quantity: int,
        unit_price: Decimal,
        subtotal: Decimal,
    ) -> int:
        raise NotImplementedError

    def delete_items(self, sale_id: int) -> int:
        raise NotImplementedError

    def delete(self, sale_id: int) -> bool:
        raise NotImplementedError

    def delete_many(self, sale_ids: Sequence[int]) -> int:
        raise NotImplementedError
