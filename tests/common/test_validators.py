from __future__ import annotations

from decimal import Decimal

import pytest

from src.sigrap.sigrap.common.validators import (
    require_int,
    require_non_negative_decimal,
    require_optional_str,
    require_positive_int,
)
from src.sigrap.sigrap.core.exceptions import ValidationError
from src.sigrap.sigrap.sale_returns.schemas import SaleReturnData
from src.sigrap.sigrap.sales.schemas import SaleItemData


@pytest.mark.parametrize("value, expected", [(3, 3), (3.0, 3), ("7", 7)])
def test_require_int_accepts_whole_numbers(value, expected):
    assert require_int(value, "quantity") == expected


@pytest.mark.parametrize("value", [2.9, 0.5, float("nan"), float("inf"), "2.9", "abc", True, None])
def test_require_int_rejects_everything_else(value):
    with pytest.raises(ValidationError):
        require_int(value, "quantity")


def test_require_positive_int_is_bounded_by_int_column():
    assert require_positive_int(2**31 - 1, "quantity") == 2**31 - 1
    with pytest.raises(ValidationError) as exc:
        require_positive_int(2**31, "quantity")

    assert "at most" in str(exc.value)


def test_require_non_negative_decimal_is_bounded_by_money_column():
    assert require_non_negative_decimal("9999999999.99", "unitPrice") == Decimal("9999999999.99")
    for value in (1e30, "10000000000", "1E+999999"):
        with pytest.raises(ValidationError):
            require_non_negative_decimal(value, "unitPrice")


def test_require_optional_str():
    assert require_optional_str(None, "notes") is None
    assert require_optional_str("ok", "notes") == "ok"
    with pytest.raises(ValidationError):
        require_optional_str(123, "notes")


def test_line_subtotal_must_fit_money_column():
    with pytest.raises(ValidationError):
        SaleItemData.from_json({"productId": 1, "quantity": 2, "unitPrice": "9999999999.99"}, index=0)


def test_return_total_must_fit_money_column():
    line = {"productId": 1, "quantity": 1, "unitPrice": "9999999999.99"}
    payload = {"originalSaleId": 1, "customerId": 1, "employeeId": 1, "reason": "Torn", "items": [line, line]}

    with pytest.raises(ValidationError) as exc:
        SaleReturnData.from_json(payload)

    assert "totalReturnAmount" in str(exc.value)


def test_return_reason_must_be_text():
    payload = {
        "originalSaleId": 1,
        "customerId": 1,
        "employeeId": 1,
        "reason": 123,
        "items": [{"productId": 1, "quantity": 1, "unitPrice": "1.00"}],
    }

    with pytest.raises(ValidationError):
        SaleReturnData.from_json(payload)
