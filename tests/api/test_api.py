from __future__ import annotations

from tests.fakes import NOTEBOOK, PAPER_REAM, PEN


def _sale_payload(*lines, customer_id=1, **extra):
    items = [{"productId": p, "quantity": q, "unitPrice": price} for p, q, price in lines]
    payload = {
        "totalAmount": "10.50",
        "taxAmount": "0",
        "finalAmount": "10.50",
        "customerId": customer_id,
        "employeeId": 1,
        "items": items,
    }
    payload.update(extra)
    return payload


def _return_payload(sale_id, *lines, customer_id=1):
    return {
        "originalSaleId": sale_id,
        "customerId": customer_id,
        "employeeId": 1,
        "reason": "Wrong color",
        "items": [{"productId": p, "quantity": q, "unitPrice": price} for p, q, price in lines],
    }


def _assert_error(resp, status):
    assert resp.status_code == status
    body = resp.get_json()
    assert body["success"] is False
    assert body["status"] == status
    assert body["message"]
    assert body["timestamp"]
    return body


def test_status(client):
    resp = client.get("/api/status")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "UP"}


def test_create_sale_returns_created_sale(client, store):
    resp = client.post(
        "/api/sales",
        json=_sale_payload((NOTEBOOK, 3, "3.50"), paymentMethod="credit_card", notes="Back to school"),
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["paymentMethod"] == "CREDIT_CARD"
    assert body["status"] == "COMPLETED"
    assert body["totalAmount"] == "10.50"
    assert body["items"][0]["productName"] == "Cuaderno"
    assert body["items"][0]["subtotal"] == "10.50"
    assert body["createdAt"].startswith("2025-05-01T")
    assert store.stock(NOTEBOOK) == 7


def test_invalid_sale_payload_is_bad_request(client, store):
    body = _assert_error(client.post("/api/sales", json=_sale_payload()), 400)

    assert body["error"] == "Bad Request"
    assert "items" in body["message"]
    assert store.sales == {}


def test_negative_quantity_is_bad_request(client):
    _assert_error(client.post("/api/sales", json=_sale_payload((NOTEBOOK, -1, "3.50"))), 400)


def test_non_json_body_is_bad_request(client):
    _assert_error(client.post("/api/sales", data="not json", content_type="text/plain"), 400)


def test_insufficient_stock_is_conflict(client, store):
    body = _assert_error(client.post("/api/sales", json=_sale_payload((PAPER_REAM, 6, "6.00"))), 409)

    assert body["error"] == "Conflict"
    assert "Resma A4" in body["message"]
    assert store.stock(PAPER_REAM) == 5


def test_unknown_sale_is_not_found(client):
    body = _assert_error(client.get("/api/sales/99"), 404)

    assert body["message"] == "Sale not found with ID: 99"


def test_unknown_route_uses_error_envelope(client):
    _assert_error(client.get("/api/nothing-here"), 404)


def test_update_and_delete_sale(client, store):
    sale_id = client.post("/api/sales", json=_sale_payload((NOTEBOOK, 3, "3.50"))).get_json()["id"]

    resp = client.put(f"/api/sales/{sale_id}", json=_sale_payload((NOTEBOOK, 1, "3.50"), (PEN, 2, "0.80")))
    assert resp.status_code == 200
    assert store.stock(NOTEBOOK) == 9
    assert store.stock(PEN) == 48

    resp = client.delete(f"/api/sales/{sale_id}")
    assert resp.status_code == 204
    assert store.stock(NOTEBOOK) == 10
    assert store.stock(PEN) == 50


def test_delete_many_with_unknown_id_is_not_found(client, store):
    sale_id = client.post("/api/sales", json=_sale_payload((NOTEBOOK, 3, "3.50"))).get_json()["id"]

    _assert_error(client.delete("/api/sales/delete-many", json=[sale_id, 99]), 404)
    assert store.stock(NOTEBOOK) == 7

    assert client.delete("/api/sales/delete-many", json=[sale_id]).status_code == 204
    assert store.stock(NOTEBOOK) == 10


def test_sale_queries(client):
    client.post("/api/sales", json=_sale_payload((NOTEBOOK, 1, "3.50"), customer_id=2))

    assert len(client.get("/api/sales").get_json()) == 1
    assert len(client.get("/api/sales/customer/2").get_json()) == 1
    assert client.get("/api/sales/customer/1").get_json() == []
    assert len(client.get("/api/sales/employee/1").get_json()) == 1

    between = client.get("/api/sales/created-between?startDate=2025-05-01T00:00:00&endDate=2025-05-02T00:00:00")
    assert between.status_code == 200
    assert len(between.get_json()) == 1

    _assert_error(client.get("/api/sales/created-between?startDate=yesterday&endDate=2025-05-02T00:00:00"), 400)
    _assert_error(client.get("/api/sales/customer/99"), 404)


def test_sale_return_lifecycle(client, store):
    sale_id = client.post("/api/sales", json=_sale_payload((NOTEBOOK, 3, "3.50"))).get_json()["id"]

    resp = client.post("/api/sale-returns", json=_return_payload(sale_id, (NOTEBOOK, 2, "3.50")))
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["totalReturnAmount"] == "7.00"
    assert created["originalSaleId"] == sale_id
    assert store.stock(NOTEBOOK) == 9

    listed = client.get(f"/api/sale-returns/original-sale/{sale_id}").get_json()
    assert [r["id"] for r in listed] == [created["id"]]

    _assert_error(client.delete(f"/api/sales/{sale_id}"), 422)

    assert client.delete(f"/api/sale-returns/{created['id']}").status_code == 204
    assert store.stock(NOTEBOOK) == 7


def test_over_return_is_unprocessable(client, store):
    sale_id = client.post("/api/sales", json=_sale_payload((NOTEBOOK, 3, "3.50"))).get_json()["id"]

    body = _assert_error(client.post("/api/sale-returns", json=_return_payload(sale_id, (NOTEBOOK, 4, "3.50"))), 422)

    assert "Cuaderno" in body["message"]
    assert store.stock(NOTEBOOK) == 7


def test_return_without_reason_is_bad_request(client):
    sale_id = client.post("/api/sales", json=_sale_payload((NOTEBOOK, 3, "3.50"))).get_json()["id"]
    payload = _return_payload(sale_id, (NOTEBOOK, 1, "3.50"))
    payload["reason"] = ""

    _assert_error(client.post("/api/sale-returns", json=payload), 400)


def test_fractional_quantity_is_bad_request(client, store):
    body = _assert_error(client.post("/api/sales", json=_sale_payload((NOTEBOOK, 2.9, "3.50"))), 400)

    assert "items[0].quantity" in body["message"]
    assert store.stock(NOTEBOOK) == 10
    assert store.sales == {}


def test_integral_float_quantity_is_accepted(client, store):
    resp = client.post("/api/sales", json=_sale_payload((NOTEBOOK, 2.0, "3.50")))

    assert resp.status_code == 201
    assert resp.get_json()["items"][0]["quantity"] == 2
    assert store.stock(NOTEBOOK) == 8


def test_out_of_range_amounts_are_bad_request(client, store):
    huge_price = _assert_error(client.post("/api/sales", json=_sale_payload((NOTEBOOK, 1, 1e30))), 400)
    assert "items[0].unitPrice" in huge_price["message"]

    _assert_error(client.post("/api/sales", json=_sale_payload((NOTEBOOK, 1, "3.50"), totalAmount="10000000000")), 400)
    _assert_error(client.post("/api/sales", json=_sale_payload((NOTEBOOK, 2, "9999999999.99"))), 400)

    assert store.stock(NOTEBOOK) == 10
    assert store.sales == {}


def test_out_of_range_quantity_is_bad_request(client, store):
    body = _assert_error(client.post("/api/sales", json=_sale_payload((NOTEBOOK, 2**31, "3.50"))), 400)

    assert "items[0].quantity" in body["message"]
    assert store.stock(NOTEBOOK) == 10


def test_non_string_reason_is_bad_request(client, store):
    sale_id = client.post("/api/sales", json=_sale_payload((NOTEBOOK, 3, "3.50"))).get_json()["id"]
    payload = _return_payload(sale_id, (NOTEBOOK, 1, "3.50"))
    payload["reason"] = 123

    body = _assert_error(client.post("/api/sale-returns", json=payload), 400)

    assert "reason" in body["message"]
    assert store.stock(NOTEBOOK) == 7
    assert store.sale_returns == {}


def test_non_string_notes_is_bad_request(client, store):
    body = _assert_error(client.post("/api/sales", json=_sale_payload((NOTEBOOK, 1, "3.50"), notes=123)), 400)

    assert "notes" in body["message"]
    assert store.sales == {}
