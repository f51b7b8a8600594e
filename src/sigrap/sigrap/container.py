from __future__ import annotations

from dataclasses import dataclass

from .customers.mysql_customer_repository import MySQLCustomerRepository
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .products.mysql_product_repository import MySQLProductRepository
from .sale_returns.mysql_sale_return_repository import MySQLSaleReturnRepository
from .sale_returns.service import SaleReturnService
from .sales.mysql_sale_repository import MySQLSaleRepository
from .sales.service import SaleService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    products_repo: MySQLProductRepository
    customers_repo: MySQLCustomerRepository
    employees_repo: MySQLEmployeeRepository
    sales_repo: MySQLSaleRepository
    sale_returns_repo: MySQLSaleReturnRepository

    sale_service: SaleService
    sale_return_service: SaleReturnService


def build_container(*, db_config: dict) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    products_repo = MySQLProductRepository(conn)
    customers_repo = MySQLCustomerRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    sales_repo = MySQLSaleRepository(conn)
    sale_returns_repo = MySQLSaleReturnRepository(conn)

    sale_service = SaleService(
        sales_repo,
        products_repo,
        customers_repo,
        employees_repo,
        unit_of_work=conn.transaction,
    )
    sale_return_service = SaleReturnService(
        sale_returns_repo,
        sales_repo,
        products_repo,
        customers_repo,
        employees_repo,
        unit_of_work=conn.transaction,
    )

    return Container(
        conn=conn,
        products_repo=products_repo,
        customers_repo=customers_repo,
        employees_repo=employees_repo,
        sales_repo=sales_repo,
        sale_returns_repo=sale_returns_repo,
        sale_service=sale_service,
        sale_return_service=sale_return_service,
    )
