from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, to_decimal
from .model import Product
from .repository import ProductRepository


class MySQLProductRepository(ProductRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, product_id: int, *, for_update: bool = False) -> Optional[Product]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT product_id, name, description, sale_price, stock
                FROM products
                WHERE product_id=%s{lock}
                """,
                (int(product_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Product(
                product_id=int(row["product_id"]),
                name=row["name"],
                stock=int(row["stock"]),
                sale_price=to_decimal(row.get("sale_price")),
                description=row.get("description"),
            )

    def adjust_stock(self, product_id: int, delta: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE products
                SET stock = stock + %s
                WHERE product_id=%s AND stock + %s >= 0
                """,
                (int(delta), int(product_id), int(delta)),
            )
            return cur.rowcount > 0
