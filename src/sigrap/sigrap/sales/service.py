from __future__ import annotations

from contextlib import nullcontext
from datetime import datetime
from typing import Callable, ContextManager, Iterable, Mapping, Optional, Sequence

from ..common.logging_utils import get_logger
from ..common.money import line_subtotal
from ..core.enums import SaleStatus
from ..core.exceptions import InvariantViolationError, NotFoundError, ValidationError
from ..customers.model import Customer
from ..customers.repository import CustomerRepository
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..inventory.reconciliation import StockReconciler, allocation, merge, negate, net_change
from ..products.model import Product
from ..products.repository import ProductRepository
from .model import Sale, SaleHeader
from .repository import SaleRepository
from .schemas import SaleData, SaleItemData

logger = get_logger("sales")

UnitOfWork = Callable[[], ContextManager]


class SaleService:
    """Use cases: sell products and keep product stock consistent.

    Every mutating call runs inside one unit of work. Stock effects are
    computed as a net per-product delta and validated before anything is
    written, so a failed request leaves stock untouched.
    """

    def __init__(
        self,
        sales: SaleRepository,
        products: ProductRepository,
        customers: CustomerRepository,
        employees: EmployeeRepository,
        *,
        unit_of_work: Optional[UnitOfWork] = None,
    ):
        self._sales = sales
        self._customers = customers
        self._employees = employees
        self._stock = StockReconciler(products)
        self._uow = unit_of_work or nullcontext

    # -------- Queries --------
    def find_all(self) -> Sequence[Sale]:
        return self._sales.list_all()

    def find_by_id(self, sale_id: int) -> Sale:
        return self._require_sale(sale_id)

    def find_by_employee(self, employee_id: int) -> Sequence[Sale]:
        employee = self._require_employee(employee_id)
        return self._sales.list_by_employee(employee.employee_id)

    def find_by_customer(self, customer_id: int) -> Sequence[Sale]:
        customer = self._require_customer(customer_id)
        return self._sales.list_by_customer(customer.customer_id)

    def find_created_between(self, start: datetime, end: datetime) -> Sequence[Sale]:
        if end < start:
            raise ValidationError("endDate must not be before startDate")
        return self._sales.list_created_between(start=start, end=end)

    # -------- Commands --------
    def create(self, data: SaleData) -> Sale:
        self._require_items(data.items)
        if data.customer_id is None:
            raise ValidationError("customerId is required")

        with self._uow():
            customer = self._require_customer(data.customer_id)
            employee = self._require_employee(data.employee_id)

            products = self._stock.require_products(i.product_id for i in data.items)
            changes = self._stock.plan(negate(allocation(data.items)), products)

            sale_id = self._sales.create(
                self._header(
                    data,
                    customer_id=customer.customer_id,
                    employee_id=employee.employee_id,
                    status=data.status or SaleStatus.COMPLETED,
                )
            )
            self._stock.apply(changes)
            self._add_items(sale_id, data.items)

            sale = self._require_sale(sale_id)

        logger.info("Created sale %s (%d items, final %s)", sale.sale_id, len(sale.items), sale.final_amount)
        return sale

    def update(self, sale_id: int, data: SaleData) -> Sale:
        self._require_items(data.items)

        with self._uow():
            existing = self._require_sale(sale_id)
            original_allocation = existing.quantities_by_product()

            customer_id = existing.customer_id
            if data.customer_id is not None:
                customer_id = self._require_customer(data.customer_id).customer_id

            employee_id = existing.employee_id
            if int(data.employee_id) != existing.employee_id:
                employee_id = self._require_employee(data.employee_id).employee_id

            new_allocation = allocation(data.items)
            returned = self._sales.returned_quantities(existing.sale_id)
            products = self._stock.require_products(set(new_allocation) | set(returned))
            self._ensure_covers_returns(new_allocation, returned, products)

            # Stock moves by (old - new) per product, checked before any write.
            deltas = negate(net_change(original_allocation, new_allocation))
            changes = self._stock.plan(deltas, products)

            self._sales.update(
                existing.sale_id,
                self._header(data, customer_id=customer_id, employee_id=employee_id, status=data.status or existing.status),
            )

            self._stock.apply(changes)
            self._sales.delete_items(existing.sale_id)
            self._add_items(existing.sale_id, data.items)

            sale = self._require_sale(existing.sale_id)

        logger.info(
            "Updated sale %s (%d items, %d stock adjustments)", sale.sale_id, len(sale.items), len(changes)
        )
        return sale

    def delete(self, sale_id: int) -> None:
        with self._uow():
            sale = self._require_sale(sale_id)
            self._ensure_no_returns(sale)
            self._stock.reconcile(sale.quantities_by_product())
            self._sales.delete(sale.sale_id)

        logger.info("Deleted sale %s, restored stock for %d items", sale.sale_id, len(sale.items))

    def delete_many(self, sale_ids: Iterable[int]) -> None:
        ids = list(dict.fromkeys(int(i) for i in sale_ids))
        if not ids:
            return

        with self._uow():
            for sale_id in ids:
                if not self._sales.exists(sale_id):
                    raise NotFoundError(f"Sale with id {sale_id} not found")

            sales = [self._require_sale(sale_id) for sale_id in ids]
            for sale in sales:
                self._ensure_no_returns(sale)

            self._stock.reconcile(merge(*(s.quantities_by_product() for s in sales)))
            self._sales.delete_many(ids)

        logger.info("Deleted %d sales: %s", len(ids), ids)

    # -------- Helpers --------
    @staticmethod
    def _require_items(items: Sequence[SaleItemData]) -> None:
        if not items:
            raise ValidationError("Sale must have at least one item")

    @staticmethod
    def _header(data: SaleData, *, customer_id: int, employee_id: int, status: SaleStatus) -> SaleHeader:
        return SaleHeader(
            total_amount=data.total_amount,
            tax_amount=data.tax_amount,
            discount_amount=data.discount_amount,
            final_amount=data.final_amount,
            customer_id=customer_id,
            employee_id=employee_id,
            payment_method=data.payment_method,
            status=status,
            notes=data.notes,
        )

    def _add_items(self, sale_id: int, items: Sequence[SaleItemData]) -> None:
        for item in items:
            self._sales.add_item(
                sale_id=sale_id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=line_subtotal(item.quantity, item.unit_price),
            )

    def _ensure_no_returns(self, sale: Sale) -> None:
        if self._sales.has_returns(sale.sale_id):
            raise InvariantViolationError(
                f"Sale {sale.sale_id} has registered returns; delete the returns first"
            )

    @staticmethod
    def _ensure_covers_returns(
        new_allocation: Mapping[int, int], returned: Mapping[int, int], products: Mapping[int, Product]
    ) -> None:
        """A sale must keep at least as many units of a product as its returns hold."""
        for product_id in sorted(returned):
            if new_allocation.get(product_id, 0) < returned[product_id]:
                raise InvariantViolationError(
                    f"Cannot reduce {products[product_id].name} below the {returned[product_id]} "
                    f"units already returned from this sale."
                )

    def _require_sale(self, sale_id: int) -> Sale:
        sale = self._sales.get_by_id(int(sale_id))
        if not sale:
            raise NotFoundError(f"Sale not found with ID: {sale_id}")
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
