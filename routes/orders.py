# routes/orders.py
from fastapi import APIRouter, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from typing import Optional
from datetime import datetime
import logging

from db.VerifyToken import user_dependency, admin_dependency
from db.connection import db_dependency
from functions.productsMana import order_code_for
from models.orders import Order, OrderItem, OrderStatus, PaymentStatus
from models.userModels import UserRole
from schemas.orders import OrderCreate, OrderStatusUpdate, PaymentStatusUpdate, OrderResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])

ORDER_STATUSES = [order_status.value for order_status in OrderStatus]
PAYMENT_STATUSES = [payment_status.value for payment_status in PaymentStatus]


def _order_query(db: Session):
    return db.query(Order).options(selectinload(Order.items))


def get_order_or_404(db: Session, order_id: int) -> Order:
    order = _order_query(db).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


def find_order(db: Session, order_ref: str) -> Optional[Order]:
    """Orders are referenced by their public code; bare numbers are row ids."""
    order = _order_query(db).filter(Order.order_code == order_ref.strip().upper()).first()
    if not order and order_ref.strip().isdigit():
        order = _order_query(db).filter(Order.id == int(order_ref)).first()
    return order


def _order_list(orders) -> dict:
    return {
        "success": True,
        "count": len(orders),
        "orders": [OrderResponse.model_validate(order) for order in orders],
    }


# ================= CREATE ORDER =================
@router.post("/", status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, db: db_dependency):
    customer, address, pricing, payment = payload.customer, payload.address, payload.pricing, payload.payment

    order = Order(
        customer_name=customer.fullName,
        customer_email=customer.email,
        customer_phone=customer.phone,
        user_id=customer.userId,
        full_address=address.fullAddress,
        city=address.city,
        state=address.state,
        pincode=address.pincode,
        subtotal=pricing.subtotal,
        shipping=pricing.shipping,
        tax=pricing.tax,
        total=pricing.total,
        payment_method=payment.method,
        payment_status=payment.status,
        transaction_id=payment.transactionId,
    )
    order.items = [
        OrderItem(
            product_id=item.productId,
            product_title=item.title,
            product_image=item.image,
            category=item.category,
            slug=item.slug,
            brand=item.brand,
            price=item.price,
            original_price=item.originalPrice,
            quantity=item.quantity,
            subtotal=item.price * item.quantity,
        )
        for item in payload.items
    ]

    db.add(order)
    # the public code is derived from the row id
    db.flush()
    order.order_code = order_code_for(order.id)
    db.commit()
    db.refresh(order)
    logger.info(f"Order {order.order_code} created for {order.customer_email}: total {order.total}")

    return {
        "success": True,
        "message": "Order created successfully",
        "orderId": order.order_code,
        "order": OrderResponse.model_validate(order),
    }


# ================= READ =================
@router.get("/")
def get_all_orders(db: db_dependency, admin: admin_dependency):
    orders = _order_query(db).order_by(Order.created_at.desc(), Order.id.desc()).limit(100).all()
    return _order_list(orders)


@router.get("/stats")
def get_order_stats(db: db_dependency, admin: admin_dependency):
    total_orders = db.query(func.count(Order.id)).scalar() or 0
    total_revenue = db.query(func.coalesce(func.sum(Order.total), 0)).scalar() or 0

    rows = db.query(Order.order_status, func.count(Order.id)).group_by(Order.order_status).all()
    by_status = {order_status: 0 for order_status in ORDER_STATUSES}
    for order_status, count in rows:
        by_status[OrderStatus(order_status).value] = count

    return {
        "success": True,
        "stats": {
            "totalOrders": total_orders,
            "totalRevenue": float(total_revenue),
            "ordersByStatus": by_status,
        },
    }


@router.get("/order-id/{order_code}")
def get_order_by_code(order_code: str, db: db_dependency):
    order = _order_query(db).filter(Order.order_code == order_code.strip().upper()).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return {"success": True, "order": OrderResponse.model_validate(order)}


@router.get("/email/{email}")
def get_orders_by_email(email: str, db: db_dependency):
    orders = (
        _order_query(db)
        .filter(Order.customer_email == email.strip().lower())
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return _order_list(orders)


@router.get("/user/{user_id}")
def get_orders_by_user(user_id: int, db: db_dependency, user: user_dependency):
    if user["user_id"] != user_id and user["role"] != UserRole.ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not Allowed To Perform This Action")

    orders = (
        _order_query(db)
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return _order_list(orders)


@router.get("/{order_id}")
def get_order_by_id(order_id: int, db: db_dependency):
    return {"success": True, "order": OrderResponse.model_validate(get_order_or_404(db, order_id))}


# ================= UPDATE =================
@router.put("/status/{order_id}")
def update_order_status(order_id: int, payload: OrderStatusUpdate, db: db_dependency, admin: admin_dependency):
    new_status = payload.orderStatus.strip().lower()
    if new_status not in ORDER_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status. Allowed: {', '.join(ORDER_STATUSES)}"
        )

    order = get_order_or_404(db, order_id)
    order.order_status = OrderStatus(new_status)
    db.commit()
    db.refresh(order)
    logger.info(f"Order {order.order_code} status -> {new_status} by admin {admin['user_id']}")

    return {"success": True, "message": "Order status updated", "order": OrderResponse.model_validate(order)}


@router.put("/payment/{order_id}")
def update_payment_status(order_id: int, payload: PaymentStatusUpdate, db: db_dependency, admin: admin_dependency):
    new_status = payload.paymentStatus.strip().lower()
    if new_status not in PAYMENT_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid payment status. Allowed: {', '.join(PAYMENT_STATUSES)}"
        )

    order = get_order_or_404(db, order_id)
    order.payment_status = PaymentStatus(new_status)
    if payload.transactionId:
        order.transaction_id = payload.transactionId
    if order.payment_status == PaymentStatus.COMPLETED:
        order.payment_date = datetime.utcnow()

    db.commit()
    db.refresh(order)
    logger.info(f"Order {order.order_code} payment -> {new_status} by admin {admin['user_id']}")

    return {"success": True, "message": "Payment status updated", "order": OrderResponse.model_validate(order)}
