from __future__ import annotations

from typing import Optional, Protocol

from .model import Product


class ProductRepository(Protocol):
    """Stock ledger consumed by the sale/return workflows."""

    def get_by_id(self, product_id: int, *, for_update: bool = False) -> Optional[Product]:
        """``for_update`` takes a row lock when called inside a unit of work."""

        raise NotImplementedError

    def adjust_stock(self, product_id: int, delta: int) -> bool:
        """Atomically add ``delta`` to stock unless the result would be negative.

        Returns False (and changes nothing) when the guard rejects the update.
        """

        raise NotImplementedError
