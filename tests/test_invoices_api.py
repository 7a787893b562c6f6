"""
Invoices billed from stored orders: idempotent creation, lookups, and the
status and print/download markers.
"""

import pytest


def place_order(client, email="asha@example.com"):
    response = client.post("/api/orders/", json={
        "items": [
            {"title": "Gel Pen", "price": 25, "quantity": 4, "image": "pen.jpg"},
            {"title": "Notebook", "price": 60, "quantity": 1},
        ],
        "customer": {"fullName": "Asha Rao", "email": email, "phone": "9999900000"},
        "address": {"fullAddress": "12 MG Road", "city": "Indore", "state": "MP", "pincode": "452001"},
        "pricing": {"subtotal": 160, "shipping": 40, "tax": 28.8, "total": 228.8},
        "payment": {"method": "upi"},
    })
    assert response.status_code == 201, response.text
    return response.json()["order"]


@pytest.fixture
def order(client):
    return place_order(client)


@pytest.fixture
def invoice(client, order):
    response = client.post("/api/invoices/create", json={"orderId": order["order_code"]})
    assert response.status_code == 201, response.text
    return response.json()["invoice"]


class TestCreate:
    def test_snapshot_of_order(self, client, order):
        response = client.post("/api/invoices/create", json={"orderId": order["order_code"]})
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Invoice created successfully"

        invoice = body["invoice"]
        assert invoice["invoice_number"] == f"INV{invoice['id']:06d}"
        assert invoice["order_id"] == order["id"]
        assert invoice["order_code"] == order["order_code"]
        assert invoice["status"] == "issued"
        assert invoice["customer_email"] == "asha@example.com"
        assert invoice["total"] == 228.8
        assert invoice["payment_method"] == "upi"
        assert invoice["payment_status"] == "pending"
        assert [(item["title"], item["total"]) for item in invoice["items"]] == [("Gel Pen", 100), ("Notebook", 60)]
        assert invoice["items"][0]["image"] == "pen.jpg"
        assert invoice["terms_and_conditions"].startswith("1. Payment terms")
        assert invoice["due_date"] > invoice["invoice_date"]

    def test_idempotent(self, client, order, invoice):
        response = client.post("/api/invoices/create", json={"orderId": order["order_code"]})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Invoice already exists for this order"
        assert body["invoice"]["id"] == invoice["id"]
        assert body["invoice"]["invoice_number"] == invoice["invoice_number"]

    def test_by_numeric_order_id(self, client, order):
        response = client.post("/api/invoices/create", json={"orderId": str(order["id"])})
        assert response.status_code == 201
        assert response.json()["invoice"]["order_code"] == order["order_code"]

    def test_numbers_are_sequential(self, client, invoice):
        second_order = place_order(client)
        second = client.post("/api/invoices/create", json={"orderId": second_order["order_code"]}).json()["invoice"]
        assert second["invoice_number"] != invoice["invoice_number"]
        assert second["invoice_number"] > invoice["invoice_number"]

    def test_unknown_order(self, client):
        response = client.post("/api/invoices/create", json={"orderId": "GLNOPE"})
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Order not found"}


class TestRead:
    def test_by_order(self, client, order, invoice):
        for ref in (order["order_code"], order["order_code"].lower(), str(order["id"])):
            body = client.get(f"/api/invoices/order/{ref}").json()
            assert body["invoice"]["id"] == invoice["id"]

    def test_by_order_without_invoice(self, client, order):
        response = client.get(f"/api/invoices/order/{order['order_code']}")
        assert response.status_code == 404
        assert response.json()["message"] == "Invoice not found"

    def test_by_number(self, client, invoice):
        body = client.get(f"/api/invoices/number/{invoice['invoice_number'].lower()}").json()
        assert body["invoice"]["id"] == invoice["id"]
        assert client.get("/api/invoices/number/INV999999").status_code == 404

    def test_by_email(self, client, invoice):
        other = place_order(client, email="ravi@example.com")
        client.post("/api/invoices/create", json={"orderId": other["order_code"]})

        body = client.get("/api/invoices/email/Asha@Example.com").json()
        assert body["total"] == 1
        assert body["invoices"][0]["id"] == invoice["id"]

    def test_all_requires_admin(self, client, user_headers, invoice):
        assert client.get("/api/invoices/all").status_code == 401
        assert client.get("/api/invoices/all", headers=user_headers).status_code == 403

    def test_all_newest_first(self, client, admin_headers, invoice):
        second_order = place_order(client)
        second = client.post("/api/invoices/create", json={"orderId": second_order["order_code"]}).json()["invoice"]

        body = client.get("/api/invoices/all", headers=admin_headers).json()
        assert body["total"] == 2
        assert [entry["id"] for entry in body["invoices"]] == [second["id"], invoice["id"]]


class TestUpdate:
    def test_status(self, client, admin_headers, invoice):
        response = client.put(f"/api/invoices/{invoice['id']}/status", json={"status": "Paid"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["invoice"]["status"] == "paid"

    def test_invalid_status(self, client, admin_headers, invoice):
        response = client.put(f"/api/invoices/{invoice['id']}/status", json={"status": "lost"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid status. Valid statuses: draft, issued")

    def test_status_requires_admin(self, client, user_headers, invoice):
        response = client.put(f"/api/invoices/{invoice['id']}/status", json={"status": "paid"}, headers=user_headers)
        assert response.status_code == 403

    def test_printed_and_downloaded(self, client, invoice):
        assert invoice["printed_at"] is None and invoice["downloaded_at"] is None

        printed = client.put(f"/api/invoices/{invoice['id']}/printed").json()
        assert printed["message"] == "Invoice marked as printed"
        assert printed["invoice"]["printed_at"] is not None

        downloaded = client.put(f"/api/invoices/{invoice['id']}/downloaded").json()
        assert downloaded["invoice"]["downloaded_at"] is not None
        assert downloaded["invoice"]["printed_at"] == printed["invoice"]["printed_at"]

    def test_missing_invoice(self, client):
        assert client.put("/api/invoices/999/printed").status_code == 404
        assert client.put("/api/invoices/999/downloaded").status_code == 404


class TestDelete:
    def test_delete(self, client, admin_headers, order, invoice):
        response = client.delete(f"/api/invoices/{invoice['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Invoice deleted successfully"}
        assert client.get(f"/api/invoices/order/{order['order_code']}").status_code == 404

        # the order can be billed again afterwards
        again = client.post("/api/invoices/create", json={"orderId": order["order_code"]})
        assert again.status_code == 201

    def test_delete_requires_admin(self, client, user_headers, invoice):
        assert client.delete(f"/api/invoices/{invoice['id']}", headers=user_headers).status_code == 403

    def test_delete_missing(self, client, admin_headers):
        assert client.delete("/api/invoices/999", headers=admin_headers).status_code == 404
