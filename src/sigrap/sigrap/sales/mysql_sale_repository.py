from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from ..core.enums import PaymentMethod, SaleStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, to_decimal
from .model import Sale, SaleHeader, SaleItem
from .repository import SaleRepository

_SALE_COLUMNS = """
    s.sale_id, s.total_amount, s.tax_amount, s.discount_amount, s.final_amount,
    s.payment_method, s.status, s.notes, s.customer_id, s.employee_id,
    s.created_at, s.updated_at
"""


class MySQLSaleRepository(SaleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Reads --------
    def get_by_id(self, sale_id: int) -> Optional[Sale]:
        sales = self._query(f"SELECT {_SALE_COLUMNS} FROM sales s WHERE s.sale_id=%s", (int(sale_id),))
        return sales[0] if sales else None

    def exists(self, sale_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM sales WHERE sale_id=%s", (int(sale_id),))
            return fetchone(cur) is not None

    def list_all(self) -> Sequence[Sale]:
        return self._query(f"SELECT {_SALE_COLUMNS} FROM sales s ORDER BY s.created_at DESC, s.sale_id DESC", ())

    def list_by_employee(self, employee_id: int) -> Sequence[Sale]:
        return self._query(
            f"SELECT {_SALE_COLUMNS} FROM sales s WHERE s.employee_id=%s ORDER BY s.created_at DESC, s.sale_id DESC",
            (int(employee_id),),
        )

    def list_by_customer(self, customer_id: int) -> Sequence[Sale]:
        return self._query(
            f"SELECT {_SALE_COLUMNS} FROM sales s WHERE s.customer_id=%s ORDER BY s.created_at DESC, s.sale_id DESC",
            (int(customer_id),),
        )

    def list_created_between(self, *, start: datetime, end: datetime) -> Sequence[Sale]:
        return self._query(
            f"""
            SELECT {_SALE_COLUMNS} FROM sales s
            WHERE s.created_at BETWEEN %s AND %s
            ORDER BY s.created_at DESC, s.sale_id DESC
            """,
            (start, end),
        )

    def has_returns(self, sale_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM sale_returns WHERE original_sale_id=%s LIMIT 1", (int(sale_id),))
            return fetchone(cur) is not None

    def returned_quantities(self, sale_id: int) -> Dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT i.product_id, SUM(i.quantity) AS returned
                FROM sale_return_items i
                JOIN sale_returns r ON r.return_id = i.return_id
                WHERE r.original_sale_id=%s
                GROUP BY i.product_id
                """,
                (int(sale_id),),
            )
            return {int(r["product_id"]): int(r["returned"]) for r in fetchall(cur)}

    # -------- Writes --------
    def create(self, header: SaleHeader) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sales(
                    total_amount, tax_amount, discount_amount, final_amount,
                    payment_method, status, notes, customer_id, employee_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                self._header_params(header),
            )
            return int(cur.lastrowid)

    def update(self, sale_id: int, header: SaleHeader) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sales
                SET total_amount=%s, tax_amount=%s, discount_amount=%s, final_amount=%s,
                    payment_method=%s, status=%s, notes=%s, customer_id=%s, employee_id=%s,
                    updated_at=CURRENT_TIMESTAMP
                WHERE sale_id=%s
                """,
                self._header_params(header) + (int(sale_id),),
            )
            return cur.rowcount > 0

    def add_item(
        self,
        *,
        sale_id: int,
        product_id: int,
        quantity: int,
        unit_price: Decimal,
        subtotal: Decimal,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sale_items(sale_id, product_id, quantity, unit_price, subtotal)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(sale_id), int(product_id), int(quantity), unit_price, subtotal),
            )
            return int(cur.lastrowid)

    def delete_items(self, sale_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sale_items WHERE sale_id=%s", (int(sale_id),))
            return int(cur.rowcount)

    def delete(self, sale_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sales WHERE sale_id=%s", (int(sale_id),))
            return cur.rowcount > 0

    def delete_many(self, sale_ids: Sequence[int]) -> int:
        if not sale_ids:
            return 0
        ids = tuple(int(i) for i in sale_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM sales WHERE sale_id IN ({in_clause(ids)})", ids)
            return int(cur.rowcount)

    # -------- Helpers --------
    @staticmethod
    def _header_params(header: SaleHeader) -> tuple:
        return (
            header.total_amount,
            header.tax_amount,
            header.discount_amount,
            header.final_amount,
            header.payment_method.value,
            header.status.value,
            header.notes,
            int(header.customer_id),
            int(header.employee_id),
        )

    def _query(self, sql: str, params: tuple) -> List[Sale]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            headers = fetchall(cur)
            if not headers:
                return []

            ids = tuple(int(r["sale_id"]) for r in headers)
            cur.execute(
                f"""
                SELECT i.item_id, i.sale_id, i.product_id, i.quantity, i.unit_price, i.subtotal,
                       p.name AS product_name
                FROM sale_items i
                LEFT JOIN products p ON p.product_id = i.product_id
                WHERE i.sale_id IN ({in_clause(ids)})
                ORDER BY i.item_id
                """,
                ids,
            )
            items_by_sale: Dict[int, List[SaleItem]] = {}
            for r in fetchall(cur):
                item = SaleItem(
                    item_id=int(r["item_id"]),
                    sale_id=int(r["sale_id"]),
                    product_id=int(r["product_id"]),
                    quantity=int(r["quantity"]),
                    unit_price=to_decimal(r["unit_price"]),
                    subtotal=to_decimal(r["subtotal"]),
                    product_name=r.get("product_name"),
                )
                items_by_sale.setdefault(item.sale_id, []).append(item)

        return [
            Sale(
                sale_id=int(r["sale_id"]),
                total_amount=to_decimal(r["total_amount"]),
                tax_amount=to_decimal(r["tax_amount"]),
                discount_amount=to_decimal(r["discount_amount"]),
                final_amount=to_decimal(r["final_amount"]),
                customer_id=int(r["customer_id"]),
                employee_id=int(r["employee_id"]),
                payment_method=PaymentMethod(r["payment_method"]),
                status=SaleStatus(r["status"]),
                notes=r.get("notes"),
                created_at=r["created_at"],
                updated_at=r["updated_at"],
                items=tuple(items_by_sale.get(int(r["sale_id"]), [])),
            )
            for r in headers
        ]
