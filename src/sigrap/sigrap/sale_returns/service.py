from __future__ import annotations

from collections import defaultdict
from contextlib import nullcontext
from typing import Callable, ContextManager, Dict, Iterable, List, Optional, Sequence

from ..common.logging_utils import get_logger
from ..common.money import line_subtotal, total_of
from ..core.exceptions import InvariantViolationError, NotFoundError, ValidationError
from ..customers.model import Customer
from ..customers.repository import CustomerRepository
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..inventory.reconciliation import StockReconciler, allocation, merge, negate, net_change
from ..products.model import Product
from ..products.repository import ProductRepository
from ..sales.model import Sale
from ..sales.repository import SaleRepository
from .model import SaleReturn, SaleReturnItem
from .repository import SaleReturnRepository
from .schemas import SaleReturnData, SaleReturnItemData

logger = get_logger("sale_returns")

UnitOfWork = Callable[[], ContextManager]


class SaleReturnService:
    """Use cases: take products back from a sale and put them back in stock.

    A return can only hold products of its original sale, never more units
    per product than were bought, and it is always filed by the customer of
    that sale. Creating a return increases stock; deleting it takes the
    stock back out.
    """

    def __init__(
        self,
        returns: SaleReturnRepository,
        sales: SaleRepository,
        products: ProductRepository,
        customers: CustomerRepository,
        employees: EmployeeRepository,
        *,
        unit_of_work: Optional[UnitOfWork] = None,
    ):
        self._returns = returns
        self._sales = sales
        self._customers = customers
        self._employees = employees
        self._stock = StockReconciler(products)
        self._uow = unit_of_work or nullcontext

    # -------- Queries --------
    def find_all(self) -> Sequence[SaleReturn]:
        return self._returns.list_all()

    def find_by_id(self, return_id: int) -> SaleReturn:
        return self._require_return(return_id)

    def find_by_original_sale(self, sale_id: int) -> Sequence[SaleReturn]:
        sale = self._require_sale(sale_id)
        return self._returns.list_by_original_sale(sale.sale_id)

    # -------- Commands --------
    def create(self, data: SaleReturnData) -> SaleReturn:
        self._require_request(data)

        with self._uow():
            sale = self._require_sale(data.original_sale_id)
            customer = self._require_customer(data.customer_id)
            if customer.customer_id != sale.customer_id:
                raise InvariantViolationError("Return customer does not match original sale customer.")
            employee = self._require_employee(data.employee_id)

            products = self._validate_against_sale(sale, data.items)
            changes = self._stock.plan(allocation(data.items), products)

            return_id = self._returns.create(
                original_sale_id=sale.sale_id,
                customer_id=customer.customer_id,
                employee_id=employee.employee_id,
                reason=data.reason.strip(),
                total_return_amount=self._total(data.items),
            )
            self._stock.apply(changes)
            for item in data.items:
                self._add_item(return_id, item)

            created = self._require_return(return_id)

        logger.info(
            "Created return %s for sale %s (%d items, total %s)",
            created.return_id,
            sale.sale_id,
            len(created.items),
            created.total_return_amount,
        )
        return created

    def update(self, return_id: int, data: SaleReturnData) -> SaleReturn:
        self._require_request(data)

        with self._uow():
            existing = self._require_return(return_id)

            sale = self._require_sale(data.original_sale_id)
            if sale.sale_id != existing.original_sale_id:
                raise InvariantViolationError("Cannot change the original sale of a return.")

            customer = self._require_customer(data.customer_id)
            if customer.customer_id != existing.customer_id:
                raise InvariantViolationError("Cannot change the customer of a return.")

            employee = self._require_employee(data.employee_id)

            products = self._validate_against_sale(sale, data.items)
            deltas = net_change(existing.quantities_by_product(), allocation(data.items))
            changes = self._stock.plan(deltas, products)

            self._returns.update(
                return_id=existing.return_id,
                employee_id=employee.employee_id,
                reason=data.reason.strip(),
                total_return_amount=self._total(data.items),
            )
            self._stock.apply(changes)
            self._sync_items(existing, data.items)

            updated = self._require_return(existing.return_id)

        logger.info(
            "Updated return %s (%d items, %d stock adjustments)", updated.return_id, len(updated.items), len(changes)
        )
        return updated

    def delete(self, return_id: int) -> None:
        with self._uow():
            existing = self._require_return(return_id)
            self._stock.reconcile(negate(existing.quantities_by_product()))
            self._returns.delete(existing.return_id)

        logger.info("Deleted return %s, took back stock for %d items", existing.return_id, len(existing.items))

    def delete_many(self, return_ids: Iterable[int]) -> None:
        ids = list(dict.fromkeys(int(i) for i in return_ids))
        if not ids:
            return

        with self._uow():
            for return_id in ids:
                if not self._returns.exists(return_id):
                    raise NotFoundError(f"Sale return with id {return_id} not found")

            found = [self._require_return(return_id) for return_id in ids]
            self._stock.reconcile(negate(merge(*(r.quantities_by_product() for r in found))))
            self._returns.delete_many(ids)

        logger.info("Deleted %d sale returns: %s", len(ids), ids)

    # -------- Helpers --------
    @staticmethod
    def _require_request(data: SaleReturnData) -> None:
        if not data.items:
            raise ValidationError("Sales return must have at least one item")
        if not data.reason or not data.reason.strip():
            raise ValidationError("Reason cannot be empty")

    @staticmethod
    def _total(items: Sequence[SaleReturnItemData]):
        return total_of(line_subtotal(i.quantity, i.unit_price) for i in items)

    def _validate_against_sale(self, sale: Sale, items: Sequence[SaleReturnItemData]) -> Dict[int, Product]:
        products = self._stock.require_products(i.product_id for i in items)
        purchased = sale.quantities_by_product()

        for product_id, quantity in allocation(items).items():
            product = products[product_id]
            if product_id not in purchased:
                raise InvariantViolationError(f"Product {product.name} was not in the original sale.")
            if quantity > purchased[product_id]:
                raise InvariantViolationError(
                    f"Cannot return more items of {product.name} than were originally purchased."
                )

        for item in items:
            sold = sale.item_for_product(item.product_id)
            if sold and sold.unit_price != item.unit_price:
                logger.warning(
                    "Return price %s for product %s differs from sale %s price %s",
                    item.unit_price,
                    item.product_id,
                    sale.sale_id,
                    sold.unit_price,
                )
        return products

    def _sync_items(self, existing: SaleReturn, items: Sequence[SaleReturnItemData]) -> None:
        """Match new lines to persisted lines by product id, in order."""

        unmatched: Dict[int, List[SaleReturnItem]] = defaultdict(list)
        for persisted in existing.items:
            unmatched[persisted.product_id].append(persisted)

        for item in items:
            bucket = unmatched.get(item.product_id)
            if bucket:
                persisted = bucket.pop(0)
                self._returns.update_item(
                    item_id=persisted.item_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    subtotal=line_subtotal(item.quantity, item.unit_price),
                )
            else:
                self._add_item(existing.return_id, item)

        for leftovers in unmatched.values():
            for persisted in leftovers:
                self._returns.delete_item(persisted.item_id)

    def _add_item(self, return_id: int, item: SaleReturnItemData) -> int:
        return self._returns.add_item(
            return_id=return_id,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            subtotal=line_subtotal(item.quantity, item.unit_price),
        )

    def _require_return(self, return_id: int) -> SaleReturn:
        found = self._returns.get_by_id(int(return_id))
        if not found:
            raise NotFoundError(f"Sale return not found with ID: {return_id}")
        return found

    def _require_sale(self, sale_id: int) -> Sale:
        sale = self._sales.get_by_id(int(sale_id))
        if not sale:
            raise NotFoundError(f"Original sale not found with ID: {sale_id}")
        return sale

    def _require_customer(self, customer_id: int) -> Customer:
        customer = self._customers.get_by_id(int(customer_id))
        if not customer:
            raise NotFoundError(f"Customer not found with ID: {customer_id}")
        return customer

    def _require_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError(f"Employee not found with ID: {employee_id}")
        return employee
