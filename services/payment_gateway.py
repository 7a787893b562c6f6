# services/payment_gateway.py
from typing import Any, Dict, Optional
import hashlib
import hmac
import logging

import requests

from functions.settings import Settings

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """The gateway could not be reached or rejected the call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def to_minor_units(amount: float) -> int:
    """Rupees -> paise."""
    return int(round(amount * 100))


def verify_signature(gateway_order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    """HMAC-SHA256 of ``order_id|payment_id`` keyed with the gateway secret."""
    if not (gateway_order_id and payment_id and signature and secret):
        return False
    body = f"{gateway_order_id}|{payment_id}".encode()
    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


class PaymentGateway:
    """Operations the payment routes need from a gateway."""

    key_secret: str = ""

    def create_order(self, amount: int, currency: str, receipt: str, notes: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def fetch_payment(self, payment_id: str) -> Dict[str, Any]:
        raise NotImplementedError

    def refund(self, payment_id: str, amount: Optional[int], notes: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def verify(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        return verify_signature(gateway_order_id, payment_id, signature, self.key_secret)


class RazorpayGateway(PaymentGateway):
    """Thin REST client for the Razorpay v1 API (basic auth with key id and secret)."""

    def __init__(self, key_id: str, key_secret: str, base_url: str, timeout: float = 60.0,
                 session: Optional[requests.Session] = None):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (key_id, key_secret)

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Payment gateway unreachable: {method} {path}: {e}")
            raise PaymentGatewayError(f"Payment gateway unreachable: {e}") from e

        if response.status_code >= 400:
            try:
                description = response.json().get("error", {}).get("description")
            except ValueError:
                description = None
            message = description or response.text or f"HTTP {response.status_code}"
            logger.warning(f"Payment gateway error {response.status_code} on {method} {path}: {message}")
            raise PaymentGatewayError(message, status_code=response.status_code)

        return response.json()

    def create_order(self, amount, currency, receipt, notes):
        return self._request("POST", "/orders", {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
        })

    def fetch_payment(self, payment_id):
        return self._request("GET", f"/payments/{payment_id}")

    def refund(self, payment_id, amount, notes):
        payload: Dict[str, Any] = {"notes": notes}
        if amount is not None:
            payload["amount"] = amount
        return self._request("POST", f"/payments/{payment_id}/refund", payload)


def build_payment_gateway(settings: Settings) -> PaymentGateway:
    if not (settings.razorpay_key_id and settings.razorpay_key_secret):
        logger.warning("RAZORPAY_KEY_ID/RAZORPAY_KEY_SECRET not set; gateway calls will be rejected")
    return RazorpayGateway(
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        base_url=settings.payment_api_url,
        timeout=settings.payment_timeout,
    )
