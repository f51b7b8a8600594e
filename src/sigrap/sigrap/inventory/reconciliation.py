"""Stock reconciliation shared by the sale and sale-return workflows.

Every workflow expresses its effect on inventory as a net delta per product
(``{product_id: change_in_stock}``). Deltas are validated as a whole before
any of them is written, so a request either moves all of its stock or none.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Protocol, Sequence

from ..common.logging_utils import get_logger
from ..core.exceptions import InsufficientStockError, NotFoundError
from ..products.model import Product
from ..products.repository import ProductRepository

logger = get_logger("inventory")


class StockLine(Protocol):
    product_id: int
    quantity: int


def allocation(lines: Iterable[StockLine]) -> Dict[int, int]:
    """Total quantity per product over a list of line items."""
    out: Dict[int, int] = defaultdict(int)
    for line in lines:
        out[int(line.product_id)] += int(line.quantity)
    return dict(out)


def net_change(before: Mapping[int, int], after: Mapping[int, int]) -> Dict[int, int]:
    """``after - before`` per product, zero entries dropped."""
    out: Dict[int, int] = {}
    for product_id in set(before) | set(after):
        diff = after.get(product_id, 0) - before.get(product_id, 0)
        if diff:
            out[product_id] = diff
    return out


def negate(deltas: Mapping[int, int]) -> Dict[int, int]:
    return {product_id: -qty for product_id, qty in deltas.items()}


def merge(*delta_maps: Mapping[int, int]) -> Dict[int, int]:
    out: Dict[int, int] = defaultdict(int)
    for deltas in delta_maps:
        for product_id, qty in deltas.items():
            out[product_id] += qty
    return {product_id: qty for product_id, qty in out.items() if qty}


@dataclass(frozen=True)
class StockChange:
    product: Product
    delta: int

    @property
    def stock_after(self) -> int:
        return self.product.stock + self.delta


class StockReconciler:
    """Validates and applies stock deltas against the product ledger.

    Products are always loaded in ascending id order so two concurrent units
    of work lock rows in the same order.
    """

    def __init__(self, products: ProductRepository):
        self._products = products

    def require_products(self, product_ids: Iterable[int], *, for_update: bool = True) -> Dict[int, Product]:
        out: Dict[int, Product] = {}
        for product_id in sorted({int(p) for p in product_ids}):
            product = self._products.get_by_id(product_id, for_update=for_update)
            if not product:
                raise NotFoundError(f"Product not found with ID: {product_id}")
            out[product_id] = product
        return out

    def plan(
        self,
        deltas: Mapping[int, int],
        products: Optional[Mapping[int, Product]] = None,
    ) -> list[StockChange]:
        """Check that every delta keeps stock non-negative; writes nothing."""

        known = dict(products or {})
        missing = [p for p in deltas if p not in known]
        if missing:
            known.update(self.require_products(missing))

        changes: list[StockChange] = []
        for product_id in sorted(deltas):
            delta = int(deltas[product_id])
            if not delta:
                continue
            change = StockChange(product=known[product_id], delta=delta)
            if change.stock_after < 0:
                raise InsufficientStockError(
                    f"Insufficient stock for product: {change.product.name} "
                    f"(available {change.product.stock}, required {-delta})",
                    product_id=product_id,
                )
            changes.append(change)
        return changes

    def apply(self, changes: Sequence[StockChange]) -> None:
        for change in changes:
            if not self._products.adjust_stock(change.product.product_id, change.delta):
                # Guarded update lost a race with another writer.
                raise InsufficientStockError(
                    f"Insufficient stock for product: {change.product.name}",
                    product_id=change.product.product_id,
                )
            logger.debug(
                "stock product=%s delta=%+d -> %d",
                change.product.product_id,
                change.delta,
                change.stock_after,
            )

    def reconcile(
        self,
        deltas: Mapping[int, int],
        products: Optional[Mapping[int, Product]] = None,
    ) -> list[StockChange]:
        changes = self.plan(deltas, products)
        self.apply(changes)
        return changes
