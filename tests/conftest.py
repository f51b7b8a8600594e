from __future__ import annotations

import pytest

from src.sigrap.sigrap.container import Container
from src.sigrap.sigrap.customers.model import Customer
from src.sigrap.sigrap.employees.model import Employee
from src.sigrap.sigrap.main import create_app
from src.sigrap.sigrap.sale_returns.service import SaleReturnService
from src.sigrap.sigrap.sales.service import SaleService
from tests.fakes import (
    InMemoryCustomers,
    InMemoryEmployees,
    InMemoryProducts,
    InMemorySaleReturns,
    InMemorySales,
    InMemoryStore,
    NOTEBOOK,
    PAPER_REAM,
    PEN,
)


@pytest.fixture()
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.add_product(NOTEBOOK, "Cuaderno", stock=10, price="3.50")
    s.add_product(PEN, "Bolígrafo", stock=50, price="0.80")
    s.add_product(PAPER_REAM, "Resma A4", stock=5, price="6.00")
    s.customers[1] = Customer(customer_id=1, first_name="Ana", last_name="Pérez", email="ana@example.com")
    s.customers[2] = Customer(customer_id=2, first_name="Luis", last_name="Gómez")
    s.employees[1] = Employee(employee_id=1, full_name="Marta Ruiz", username="marta")
    s.employees[2] = Employee(employee_id=2, full_name="Jorge Díaz", username="jorge")
    return s


@pytest.fixture()
def products_repo(store) -> InMemoryProducts:
    return InMemoryProducts(store)


@pytest.fixture()
def sales_repo(store) -> InMemorySales:
    return InMemorySales(store)


@pytest.fixture()
def returns_repo(store) -> InMemorySaleReturns:
    return InMemorySaleReturns(store)


@pytest.fixture()
def sale_service(store, sales_repo, products_repo) -> SaleService:
    return SaleService(
        sales_repo,
        products_repo,
        InMemoryCustomers(store),
        InMemoryEmployees(store),
        unit_of_work=store.transaction,
    )


@pytest.fixture()
def return_service(store, returns_repo, sales_repo, products_repo) -> SaleReturnService:
    return SaleReturnService(
        returns_repo,
        sales_repo,
        products_repo,
        InMemoryCustomers(store),
        InMemoryEmployees(store),
        unit_of_work=store.transaction,
    )


@pytest.fixture()
def client(store, products_repo, sales_repo, returns_repo, sale_service, return_service):
    container = Container(
        conn=None,
        products_repo=products_repo,
        customers_repo=InMemoryCustomers(store),
        employees_repo=InMemoryEmployees(store),
        sales_repo=sales_repo,
        sale_returns_repo=returns_repo,
        sale_service=sale_service,
        sale_return_service=return_service,
    )
    app = create_app(settings_module="config.testing", container=container)
    return app.test_client()

