from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, to_decimal
from .model import SaleReturn, SaleReturnItem
from .repository import SaleReturnRepository

_RETURN_COLUMNS = """
    r.return_id, r.original_sale_id, r.customer_id, r.employee_id,
    r.total_return_amount, r.reason, r.created_at, r.updated_at
"""


class MySQLSaleReturnRepository(SaleReturnRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Reads --------
    def get_by_id(self, return_id: int) -> Optional[SaleReturn]:
        found = self._query(f"SELECT {_RETURN_COLUMNS} FROM sale_returns r WHERE r.return_id=%s", (int(return_id),))
        return found[0] if found else None

    def exists(self, return_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM sale_returns WHERE return_id=%s", (int(return_id),))
            return fetchone(cur) is not None

    def list_all(self) -> Sequence[SaleReturn]:
        return self._query(
            f"SELECT {_RETURN_COLUMNS} FROM sale_returns r ORDER BY r.created_at DESC, r.return_id DESC", ()
        )

    def list_by_original_sale(self, sale_id: int) -> Sequence[SaleReturn]:
        return self._query(
            f"""
            SELECT {_RETURN_COLUMNS} FROM sale_returns r
            WHERE r.original_sale_id=%s
            ORDER BY r.created_at DESC, r.return_id DESC
            """,
            (int(sale_id),),
        )

    # -------- Header writes --------
    def create(
        self,
        *,
        original_sale_id: int,
        customer_id: int,
        employee_id: int,
        reason: str,
        total_return_amount: Decimal,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sale_returns(original_sale_id, customer_id, employee_id, reason, total_return_amount)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(original_sale_id), int(customer_id), int(employee_id), reason, total_return_amount),
            )
            return int(cur.lastrowid)

    def update(
        self,
        *,
        return_id: int,
        employee_id: int,
        reason: str,
        total_return_amount: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sale_returns
                SET employee_id=%s, reason=%s, total_return_amount=%s, updated_at=CURRENT_TIMESTAMP
                WHERE return_id=%s
                """,
                (int(employee_id), reason, total_return_amount, int(return_id)),
            )
            return cur.rowcount > 0

    def delete(self, return_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sale_returns WHERE return_id=%s", (int(return_id),))
            return cur.rowcount > 0

    def delete_many(self, return_ids: Sequence[int]) -> int:
        if not return_ids:
            return 0
        ids = tuple(int(i) for i in return_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM sale_returns WHERE return_id IN ({in_clause(ids)})", ids)
            return int(cur.rowcount)

    # -------- Item writes --------
    def add_item(
        self,
        *,
        return_id: int,
        product_id: int,
        quantity: int,
        unit_price: Decimal,
        subtotal: Decimal,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sale_return_items(return_id, product_id, quantity, unit_price, subtotal)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(return_id), int(product_id), int(quantity), unit_price, subtotal),
            )
            return int(cur.lastrowid)

    def update_item(self, *, item_id: int, quantity: int, unit_price: Decimal, subtotal: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sale_return_items
                SET quantity=%s, unit_price=%s, subtotal=%s
                WHERE item_id=%s
                """,
                (int(quantity), unit_price, subtotal, int(item_id)),
            )
            # rowcount is 0 when nothing changed, so check existence instead
            cur.execute("SELECT 1 AS found FROM sale_return_items WHERE item_id=%s", (int(item_id),))
            return fetchone(cur) is not None

    def delete_item(self, item_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sale_return_items WHERE item_id=%s", (int(item_id),))
            return cur.rowcount > 0

    # -------- Helpers --------
    def _query(self, sql: str, params: tuple) -> List[SaleReturn]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            headers = fetchall(cur)
            if not headers:
                return []

            ids = tuple(int(r["return_id"]) for r in headers)
            cur.execute(
                f"""
                SELECT i.item_id, i.return_id, i.product_id, i.quantity, i.unit_price, i.subtotal,
                       p.name AS product_name
                FROM sale_return_items i
                LEFT JOIN products p ON p.product_id = i.product_id
                WHERE i.return_id IN ({in_clause(ids)})
                ORDER BY i.item_id
                """,
                ids,
            )
            items_by_return: Dict[int, List[SaleReturnItem]] = {}
            for r in fetchall(cur):
                item = SaleReturnItem(
                    item_id=int(r["item_id"]),
                    return_id=int(r["return_id"]),
                    product_id=int(r["product_id"]),
                    quantity=int(r["quantity"]),
                    unit_price=to_decimal(r["unit_price"]),
                    subtotal=to_decimal(r["subtotal"]),
                    product_name=r.get("product_name"),
                )
                items_by_return.setdefault(item.return_id, []).append(item)

        return [
            SaleReturn(
                return_id=int(r["return_id"]),
                original_sale_id=int(r["original_sale_id"]),
                customer_id=int(r["customer_id"]),
                employee_id=int(r["employee_id"]),
                total_return_amount=to_decimal(r["total_return_amount"]),
                reason=r["reason"],
                created_at=r["created_at"],
                updated_at=r["updated_at"],
                items=tuple(items_by_return.get(int(r["return_id"]), [])),
            )
            for r in headers
        ]
