# routes/payments.py
from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import Annotated
from datetime import datetime, timezone
import logging

from db.VerifyToken import admin_dependency
from db.connection import db_dependency
from functions.settings import get_settings
from models.orders import Order, OrderStatus, PaymentStatus
from routes.orders import find_order
from schemas.payments import CreatePaymentOrder, VerifyPayment, RefundRequest
from services.payment_gateway import PaymentGateway, to_minor_units

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payment", tags=["Payments"])


def get_payment_gateway(request: Request) -> PaymentGateway:
    gateway = getattr(request.app.state, "payment_gateway", None)
    if gateway is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Payment gateway not configured")
    return gateway


gateway_dependency = Annotated[PaymentGateway, Depends(get_payment_gateway)]


@router.post("/create-order")
def create_payment_order(payload: CreatePaymentOrder, db: db_dependency, gateway: gateway_dependency):
    order = find_order(db, payload.orderId)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    if order.payment_status == PaymentStatus.COMPLETED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order is already paid")

    # the charge always comes from the stored order total
    amount = to_minor_units(order.total)
    if payload.amount is not None and to_minor_units(payload.amount) != amount:
        logger.warning(f"Amount {payload.amount} does not match total {order.total} for {order.order_code}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Amount does not match order total")

    gateway_order = gateway.create_order(
        amount=amount,
        currency=get_settings().payment_currency,
        receipt=order.order_code,
        notes={
            "orderId": order.order_code,
            "customerEmail": payload.customerEmail or order.customer_email,
            "customerName": payload.customerName or order.customer_name,
        },
    )

    order.gateway_order_id = gateway_order["id"]
    db.commit()
    logger.info(f"Gateway order {gateway_order['id']} created for {order.order_code}")

    return {
        "success": True,
        "razorpayOrderId": gateway_order["id"],
        "amount": gateway_order["amount"],
        "currency": gateway_order["currency"],
        "orderId": order.order_code,
    }


@router.post("/verify")
def verify_payment(payload: VerifyPayment, db: db_dependency, gateway: gateway_dependency):
    if not gateway.verify(payload.razorpayOrderId, payload.razorpayPaymentId, payload.razorpaySignature):
        logger.warning(f"Signature mismatch for gateway order {payload.razorpayOrderId}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payment signature")

    if payload.orderId:
        order = find_order(db, payload.orderId)
    else:
        order = db.query(Order).filter(Order.gateway_order_id == payload.razorpayOrderId).first()

    if not order:
        if payload.orderId:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
        return {
            "success": True,
            "message": "Payment signature verified successfully",
            "paymentId": payload.razorpayPaymentId,
        }

    # the signed gateway order must be the one opened for this store order
    if not order.gateway_order_id or order.gateway_order_id != payload.razorpayOrderId:
        logger.warning(
            f"Gateway order {payload.razorpayOrderId} does not belong to order {order.order_code}"
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Payment does not match this order"
        )

    order.payment_status = PaymentStatus.COMPLETED
    order.transaction_id = payload.razorpayPaymentId
    order.payment_date = datetime.utcnow()
    order.order_status = OrderStatus.CONFIRMED
    db.commit()
    logger.info(f"Payment {payload.razorpayPaymentId} verified for order {order.order_code}")

    return {
        "success": True,
        "message": "Payment verified successfully",
        "paymentId": payload.razorpayPaymentId,
        "orderId": order.order_code,
    }


@router.get("/details/{payment_id}")
def get_payment_details(payment_id: str, gateway: gateway_dependency):
    payment = gateway.fetch_payment(payment_id)
    created_at = payment.get("created_at")
    return {
        "success": True,
        "payment": {
            "id": payment.get("id"),
            "amount": payment.get("amount"),
            "currency": payment.get("currency"),
            "status": payment.get("status"),
            "method": payment.get("method"),
            "email": payment.get("email"),
            "contact": payment.get("contact"),
            "createdAt": datetime.fromtimestamp(created_at, tz=timezone.utc) if created_at else None,
        },
    }


@router.post("/refund")
def refund_payment(payload: RefundRequest, gateway: gateway_dependency, admin: admin_dependency):
    refund = gateway.refund(
        payload.paymentId,
        amount=to_minor_units(payload.amount) if payload.amount is not None else None,
        notes={"reason": payload.reason or "Customer requested refund"},
    )
    logger.info(f"Refund {refund.get('id')} issued for payment {payload.paymentId} by admin {admin['user_id']}")

    return {
        "success": True,
        "message": "Refund processed successfully",
        "refund": {
            "id": refund.get("id"),
            "amount": refund.get("amount"),
            "status": refund.get("status"),
            "reasonCode": refund.get("reason_code"),
        },
    }
