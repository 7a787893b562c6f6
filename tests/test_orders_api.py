"""
Order placement, lookups, admin status updates and statistics.
"""

import pytest


def order_payload(**overrides):
    payload = {
        "items": [
            {"productId": None, "title": "Gel Pen", "price": 25, "quantity": 4, "brand": "Cello"},
            {"title": "Notebook", "price": 60, "quantity": 1},
        ],
        "customer": {"fullName": " Asha Rao ", "email": "Asha@Example.com", "phone": "9999900000"},
        "address": {"fullAddress": "12 MG Road", "city": "Indore", "state": "MP", "pincode": "452001"},
        "pricing": {"subtotal": 160, "shipping": 40, "tax": 28.8, "total": 228.8},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def placed_order(client):
    response = client.post("/api/orders/", json=order_payload())
    assert response.status_code == 201, response.text
    return response.json()["order"]


class TestCreate:
    def test_create(self, client):
        response = client.post("/api/orders/", json=order_payload())
        assert response.status_code == 201
        body = response.json()
        order = body["order"]

        assert body["orderId"] == order["order_code"]
        assert order["order_code"].startswith("GL")
        assert order["customer_name"] == "Asha Rao"
        assert order["customer_email"] == "asha@example.com"
        assert order["order_status"] == "pending"
        assert order["payment_method"] == "cod"
        assert order["payment_status"] == "pending"
        assert [item["subtotal"] for item in order["items"]] == [100, 60]

    def test_codes_are_unique(self, client):
        first = client.post("/api/orders/", json=order_payload()).json()["orderId"]
        second = client.post("/api/orders/", json=order_payload()).json()["orderId"]
        assert first != second

    @pytest.mark.parametrize("overrides", [
        {"items": []},
        {"customer": {"fullName": "Asha", "email": "not-an-email", "phone": "1"}},
        {"address": {"fullAddress": "12 MG Road", "city": "Indore", "state": "MP"}},
        {"pricing": {"subtotal": 10}},
    ])
    def test_rejects_incomplete_orders(self, client, overrides):
        response = client.post("/api/orders/", json=order_payload(**overrides))
        assert response.status_code == 400
        assert response.json()["success"] is False


class TestLookups:
    def test_by_code_and_id(self, client, placed_order):
        by_code = client.get(f"/api/orders/order-id/{placed_order['order_code'].lower()}").json()
        assert by_code["order"]["id"] == placed_order["id"]

        by_id = client.get(f"/api/orders/{placed_order['id']}").json()
        assert by_id["order"]["order_code"] == placed_order["order_code"]

    def test_by_email(self, client, placed_order):
        body = client.get("/api/orders/email/ASHA@example.com").json()
        assert body["count"] == 1

    def test_missing(self, client):
        response = client.get("/api/orders/order-id/GLNOPE")
        assert response.status_code == 404
        assert response.json()["message"] == "Order not found"

    def test_by_user_requires_owner_or_admin(self, client, user_headers, admin_headers):
        assert client.get("/api/orders/user/999", headers=user_headers).status_code == 403
        assert client.get("/api/orders/user/999", headers=admin_headers).json()["count"] == 0


class TestAdmin:
    def test_list_requires_admin(self, client, placed_order, user_headers):
        assert client.get("/api/orders/", headers=user_headers).status_code == 403

    def test_list(self, client, placed_order, admin_headers):
        body = client.get("/api/orders/", headers=admin_headers).json()
        assert body["count"] == 1

    def test_update_status(self, client, placed_order, admin_headers):
        response = client.put(
            f"/api/orders/status/{placed_order['id']}", json={"orderStatus": "shipped"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["order"]["order_status"] == "shipped"

    def test_invalid_status(self, client, placed_order, admin_headers):
        response = client.put(
            f"/api/orders/status/{placed_order['id']}", json={"orderStatus": "lost"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid status. Allowed:")

    def test_update_payment_status(self, client, placed_order, admin_headers):
        response = client.put(
            f"/api/orders/payment/{placed_order['id']}",
            json={"paymentStatus": "completed", "transactionId": "txn_1"},
            headers=admin_headers,
        )
        order = response.json()["order"]
        assert order["payment_status"] == "completed"
        assert order["transaction_id"] == "txn_1"
        assert order["payment_date"] is not None

    def test_invalid_payment_status(self, client, placed_order, admin_headers):
        response = client.put(
            f"/api/orders/payment/{placed_order['id']}", json={"paymentStatus": "refunded"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_stats(self, client, admin_headers):
        client.post("/api/orders/", json=order_payload())
        client.post("/api/orders/", json=order_payload(pricing={"subtotal": 100, "tax": 0, "total": 100}))

        stats = client.get("/api/orders/stats", headers=admin_headers).json()["stats"]
        assert stats["totalOrders"] == 2
        assert stats["totalRevenue"] == pytest.approx(328.8)
        assert stats["ordersByStatus"]["pending"] == 2
        assert stats["ordersByStatus"]["shipped"] == 0
