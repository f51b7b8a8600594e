"""Example: use the service layer directly (no Flask).

Sells two notebooks to customer 1 and prints the resulting sale.
"""

import importlib
from decimal import Decimal

from config import get_settings_module

from src.sigrap.sigrap.container import build_container
from src.sigrap.sigrap.sales.schemas import SaleData, SaleItemData, sale_to_json


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    sale = container.sale_service.create(
        SaleData(
            total_amount=Decimal("15000.00"),
            tax_amount=Decimal("2850.00"),
            final_amount=Decimal("17850.00"),
            customer_id=1,
            employee_id=1,
            items=(SaleItemData(product_id=1, quantity=2, unit_price=Decimal("7500.00")),),
        )
    )
    print(sale_to_json(sale))


if __name__ == "__main__":
    main()
