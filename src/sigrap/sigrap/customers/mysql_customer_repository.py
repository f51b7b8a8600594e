from __future__ import annotations

from typing import Optional

from ..core.enums import CustomerStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Customer
from .repository import CustomerRepository


class MySQLCustomerRepository(CustomerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT customer_id, first_name, last_name, email, status
                FROM customers
                WHERE customer_id=%s
                """,
                (int(customer_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Customer(
                customer_id=int(row["customer_id"]),
                first_name=row["first_name"],
                last_name=row["last_name"],
                email=row.get("email"),
                status=CustomerStatus(row.get("status") or CustomerStatus.ACTIVE.value),
            )
