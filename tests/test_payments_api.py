"""
Payment endpoints with a fake gateway, plus the HMAC signature check and the
REST client error mapping.
"""

import hashlib
import hmac
from unittest.mock import MagicMock

import pytest
import requests

from services.payment_gateway import (
    PaymentGatewayError, RazorpayGateway, to_minor_units, verify_signature,
)

SECRET = "test-secret"


def sign(order_id, payment_id, secret=SECRET):
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


def place_order(client, price, quantity, tax=0):
    subtotal = price * quantity
    response = client.post("/api/orders/", json={
        "items": [{"title": "Gel Pen", "price": price, "quantity": quantity}],
        "customer": {"fullName": "Asha", "email": "asha@example.com", "phone": "99999"},
        "address": {"fullAddress": "12 MG Road", "city": "Indore", "state": "MP", "pincode": "452001"},
        "pricing": {"subtotal": subtotal, "tax": tax, "total": subtotal + tax},
        "payment": {"method": "upi"},
    })
    return response.json()["orderId"]


@pytest.fixture
def order_code(client):
    return place_order(client, 25, 2, tax=9)


class TestSignature:
    def test_valid(self):
        assert verify_signature("order_1", "pay_1", sign("order_1", "pay_1"), SECRET) is True

    def test_tampered(self):
        assert verify_signature("order_1", "pay_2", sign("order_1", "pay_1"), SECRET) is False

    def test_missing_secret(self):
        assert verify_signature("order_1", "pay_1", sign("order_1", "pay_1", ""), "") is False

    def test_minor_units(self):
        assert to_minor_units(59) == 5900
        assert to_minor_units(19.99) == 1999


class TestCreatePaymentOrder:
    def test_create(self, client, fake_gateway, order_code):
        response = client.post("/api/payment/create-order", json={"amount": 59, "orderId": order_code})
        assert response.status_code == 200
        body = response.json()
        assert body["razorpayOrderId"] == "order_TEST123"
        assert body["amount"] == 5900
        assert body["currency"] == "INR"

        name, amount, currency, receipt, notes = fake_gateway.calls[0]
        assert (name, amount, receipt) == ("create_order", 5900, order_code)
        assert notes["customerEmail"] == "asha@example.com"

    def test_unknown_order(self, client):
        response = client.post("/api/payment/create-order", json={"amount": 59, "orderId": "GLNOPE"})
        assert response.status_code == 404

    def test_missing_amount_charges_order_total(self, client, fake_gateway, order_code):
        response = client.post("/api/payment/create-order", json={"orderId": order_code})
        assert response.status_code == 200
        assert response.json()["amount"] == 5900
        assert fake_gateway.calls[0][1] == 5900

    def test_amount_must_match_order_total(self, client, fake_gateway, order_code):
        response = client.post("/api/payment/create-order", json={"amount": 1, "orderId": order_code})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Amount does not match order total"}
        assert fake_gateway.calls == []

    def test_paid_order_rejected(self, client, order_code):
        client.post("/api/payment/create-order", json={"orderId": order_code})
        client.post("/api/payment/verify", json={
            "razorpayOrderId": "order_TEST123",
            "razorpayPaymentId": "pay_ABC",
            "razorpaySignature": sign("order_TEST123", "pay_ABC"),
            "orderId": order_code,
        })
        response = client.post("/api/payment/create-order", json={"orderId": order_code})
        assert response.status_code == 400
        assert response.json()["message"] == "Order is already paid"

    def test_gateway_failure_is_502(self, client, fake_gateway, order_code):
        fake_gateway.fail_with = "Authentication failed"
        response = client.post("/api/payment/create-order", json={"amount": 59, "orderId": order_code})
        assert response.status_code == 502
        assert response.json() == {"success": False, "message": "Payment gateway error: Authentication failed"}


class TestVerify:
    def test_marks_order_paid(self, client, order_code):
        client.post("/api/payment/create-order", json={"amount": 59, "orderId": order_code})
        response = client.post("/api/payment/verify", json={
            "razorpayOrderId": "order_TEST123",
            "razorpayPaymentId": "pay_ABC",
            "razorpaySignature": sign("order_TEST123", "pay_ABC"),
        })
        assert response.status_code == 200
        assert response.json()["orderId"] == order_code

        order = client.get(f"/api/orders/order-id/{order_code}").json()["order"]
        assert order["payment_status"] == "completed"
        assert order["order_status"] == "confirmed"
        assert order["transaction_id"] == "pay_ABC"

    def test_bad_signature_rejected(self, client, order_code):
        response = client.post("/api/payment/verify", json={
            "razorpayOrderId": "order_TEST123",
            "razorpayPaymentId": "pay_ABC",
            "razorpaySignature": "deadbeef",
            "orderId": order_code,
        })
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid payment signature"

        order = client.get(f"/api/orders/order-id/{order_code}").json()["order"]
        assert order["payment_status"] == "pending"

    def test_signature_for_another_order_rejected(self, client):
        cheap = place_order(client, 1, 1)
        pricey = place_order(client, 5_000_000, 1)
        created = client.post("/api/payment/create-order", json={"amount": 1, "orderId": cheap}).json()
        assert created["amount"] == 100
        underpaid = client.post("/api/payment/create-order", json={"amount": 1, "orderId": pricey})
        assert underpaid.status_code == 400

        response = client.post("/api/payment/verify", json={
            "razorpayOrderId": "order_TEST123",
            "razorpayPaymentId": "pay_CHEAP",
            "razorpaySignature": sign("order_TEST123", "pay_CHEAP"),
            "orderId": pricey,
        })
        assert response.status_code == 400
        assert response.json()["message"] == "Payment does not match this order"

        order = client.get(f"/api/orders/order-id/{pricey}").json()["order"]
        assert order["payment_status"] == "pending"
        assert order["order_status"] == "pending"
        assert order["gateway_order_id"] is None

    def test_verify_before_gateway_order_rejected(self, client, order_code):
        response = client.post("/api/payment/verify", json={
            "razorpayOrderId": "order_TEST123",
            "razorpayPaymentId": "pay_ABC",
            "razorpaySignature": sign("order_TEST123", "pay_ABC"),
            "orderId": order_code,
        })
        assert response.status_code == 400
        order = client.get(f"/api/orders/order-id/{order_code}").json()["order"]
        assert order["payment_status"] == "pending"


class TestDetailsAndRefund:
    def test_details(self, client):
        body = client.get("/api/payment/details/pay_ABC").json()
        assert body["payment"]["id"] == "pay_ABC"
        assert body["payment"]["status"] == "captured"
        assert body["payment"]["createdAt"].startswith("2023-11-14")

    def test_refund_requires_admin(self, client, user_headers):
        response = client.post("/api/payment/refund", json={"paymentId": "pay_ABC"}, headers=user_headers)
        assert response.status_code == 403

    def test_refund(self, client, fake_gateway, admin_headers):
        response = client.post(
            "/api/payment/refund", json={"paymentId": "pay_ABC", "amount": 10.5}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["refund"]["status"] == "processed"
        assert fake_gateway.calls[-1] == ("refund", "pay_ABC", 1050, {"reason": "Customer requested refund"})


class TestRazorpayClient:
    def make_gateway(self, response=None, error=None):
        session = MagicMock()
        if error:
            session.request.side_effect = error
        else:
            session.request.return_value = response
        return RazorpayGateway("key", "secret", "https://api.example.com/v1/", session=session), session

    def test_create_order_request(self):
        response = MagicMock(status_code=200)
        response.json.return_value = {"id": "order_1", "amount": 100, "currency": "INR"}
        gateway, session = self.make_gateway(response)

        assert gateway.create_order(100, "INR", "GL1", {})["id"] == "order_1"
        args, kwargs = session.request.call_args
        assert args == ("POST", "https://api.example.com/v1/orders")
        assert kwargs["json"]["amount"] == 100
        assert session.auth == ("key", "secret")

    def test_error_description_surfaces(self):
        response = MagicMock(status_code=400, text="bad")
        response.json.return_value = {"error": {"description": "The id provided does not exist"}}
        gateway, _ = self.make_gateway(response)

        with pytest.raises(PaymentGatewayError) as excinfo:
            gateway.fetch_payment("pay_missing")
        assert excinfo.value.message == "The id provided does not exist"
        assert excinfo.value.status_code == 400

    def test_network_error(self):
        gateway, _ = self.make_gateway(error=requests.ConnectionError("refused"))
        with pytest.raises(PaymentGatewayError):
            gateway.refund("pay_1", None, {})
