"""
Pytest configuration and shared fixtures.

Every API test runs against a fresh in-memory SQLite database and a fake
payment gateway installed on the application state.
"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db.connection import get_db
from db.database import Base, create_tables
from Endpoints.Auth.normal_register import ensure_admin
from main import app
from models.Products import Product
from services.payment_gateway import PaymentGateway, PaymentGatewayError

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password-123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakePaymentGateway(PaymentGateway):
    """Records calls instead of talking to the network."""

    key_secret = "test-secret"

    def __init__(self):
        self.calls = []
        self.fail_with = None

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail_with:
            raise PaymentGatewayError(self.fail_with, status_code=500)

    def create_order(self, amount, currency, receipt, notes):
        self._record("create_order", amount, currency, receipt, notes)
        return {"id": "order_TEST123", "amount": amount, "currency": currency, "receipt": receipt}

    def fetch_payment(self, payment_id):
        self._record("fetch_payment", payment_id)
        return {
            "id": payment_id,
            "amount": 150000,
            "currency": "INR",
            "status": "captured",
            "method": "upi",
            "email": "buyer@example.com",
            "contact": "+919999999999",
            "created_at": 1700000000,
        }

    def refund(self, payment_id, amount, notes):
        self._record("refund", payment_id, amount, notes)
        return {"id": "rfnd_TEST1", "amount": amount, "status": "processed", "reason_code": None}


@pytest.fixture
def db_session():
    create_tables(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_gateway():
    return FakePaymentGateway()


@pytest.fixture
def client(db_session, fake_gateway):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.state.payment_gateway = fake_gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client, db_session):
    ensure_admin(db_session, ADMIN_EMAIL, ADMIN_PASSWORD)
    response = client.post("/user/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def user_headers(client):
    client.post("/user/register", json={
        "userName": "Buyer", "email": "buyer@example.com", "password": "buyer-password-1",
    })
    response = client.post("/user/login", json={"email": "buyer@example.com", "password": "buyer-password-1"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def make_product(db_session):
    """Insert a catalog entry directly; created_at increases with each call."""
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        defaults = {
            "title": f"Item {counter['n']}",
            "description": "Catalog entry",
            "price": 100.0,
            "type": "stationery",
            "created_at": datetime(2024, 1, 1) + timedelta(minutes=counter["n"]),
        }
        defaults.update(fields)
        product = Product(**defaults)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make
