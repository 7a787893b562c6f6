# routes/invoices.py
from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session, selectinload
from datetime import datetime
import logging

from db.VerifyToken import admin_dependency
from db.connection import db_dependency
from models.invoices import Invoice, InvoiceItem, InvoiceStatus
from routes.orders import find_order
from schemas.invoices import InvoiceCreate, InvoiceStatusUpdate, InvoiceResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoices", tags=["Invoices"])

INVOICE_STATUSES = [invoice_status.value for invoice_status in InvoiceStatus]

INVOICE_NOTES = "Thank you for your order! Please keep this invoice for your records."
INVOICE_TERMS = (
    "1. Payment terms: Due on receipt\n"
    "2. Please retain this invoice for warranty claims\n"
    "3. Products are non-refundable after 48 hours of delivery\n"
    "4. For disputes, contact support within 7 days of delivery"
)


def invoice_number_for(invoice_id: int) -> str:
    return f"INV{invoice_id:06d}"


def _invoice_query(db: Session):
    return db.query(Invoice).options(selectinload(Invoice.items))


def get_invoice_or_404(db: Session, invoice_id: int) -> Invoice:
    invoice = _invoice_query(db).filter(Invoice.id == invoice_id).first()
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice


def _invoice_list(invoices) -> dict:
    return {
        "success": True,
        "total": len(invoices),
        "invoices": [InvoiceResponse.model_validate(invoice) for invoice in invoices],
    }


# ================= CREATE INVOICE =================
@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_invoice(payload: InvoiceCreate, db: db_dependency):
    """Bill an order. Asking again for the same order returns the existing invoice."""
    order = find_order(db, payload.orderId)
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    existing = _invoice_query(db).filter(Invoice.order_id == order.id).first()
    if existing:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=jsonable_encoder({
                "success": True,
                "message": "Invoice already exists for this order",
                "invoice": InvoiceResponse.model_validate(existing),
            }),
        )

    invoice = Invoice(
        order_id=order.id,
        order_code=order.order_code,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        full_address=order.full_address,
        city=order.city,
        state=order.state,
        pincode=order.pincode,
        subtotal=order.subtotal,
        shipping=order.shipping or 0,
        tax=order.tax,
        total=order.total,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        notes=INVOICE_NOTES,
        terms_and_conditions=INVOICE_TERMS,
    )
    invoice.items = [
        InvoiceItem(
            title=item.product_title,
            image=item.product_image,
            quantity=item.quantity,
            price=item.price,
            total=item.price * item.quantity,
        )
        for item in order.items
    ]

    db.add(invoice)
    # numbered from the row id, like order codes
    db.flush()
    invoice.invoice_number = invoice_number_for(invoice.id)
    db.commit()
    db.refresh(invoice)
    logger.info(f"Invoice {invoice.invoice_number} created for order {order.order_code}")

    return {
        "success": True,
        "message": "Invoice created successfully",
        "invoice": InvoiceResponse.model_validate(invoice),
    }


# ================= READ =================
@router.get("/all")
def get_all_invoices(db: db_dependency, admin: admin_dependency):
    invoices = _invoice_query(db).order_by(Invoice.created_at.desc(), Invoice.id.desc()).limit(100).all()
    return _invoice_list(invoices)


@router.get("/order/{order_ref}")
def get_invoice_by_order(order_ref: str, db: db_dependency):
    order = find_order(db, order_ref)
    invoice = _invoice_query(db).filter(Invoice.order_id == order.id).first() if order else None
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return {"success": True, "invoice": InvoiceResponse.model_validate(invoice)}


@router.get("/number/{invoice_number}")
def get_invoice_by_number(invoice_number: str, db: db_dependency):
    invoice = _invoice_query(db).filter(Invoice.invoice_number == invoice_number.strip().upper()).first()
    if not invoice:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return {"success": True, "invoice": InvoiceResponse.model_validate(invoice)}


@router.get("/email/{email}")
def get_invoices_by_email(email: str, db: db_dependency):
    invoices = (
        _invoice_query(db)
        .filter(Invoice.customer_email == email.strip().lower())
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        .all()
    )
    return _invoice_list(invoices)


# ================= UPDATE =================
@router.put("/{invoice_id}/status")
def update_invoice_status(invoice_id: int, payload: InvoiceStatusUpdate, db: db_dependency, admin: admin_dependency):
    new_status = payload.status.strip().lower()
    if new_status not in INVOICE_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status. Valid statuses: {', '.join(INVOICE_STATUSES)}"
        )

    invoice = get_invoice_or_404(db, invoice_id)
    invoice.status = InvoiceStatus(new_status)
    db.commit()
    db.refresh(invoice)
    logger.info(f"Invoice {invoice.invoice_number} status -> {new_status} by admin {admin['user_id']}")

    return {
        "success": True,
        "message": "Invoice status updated successfully",
        "invoice": InvoiceResponse.model_validate(invoice),
    }


@router.put("/{invoice_id}/printed")
def mark_invoice_printed(invoice_id: int, db: db_dependency):
    invoice = get_invoice_or_404(db, invoice_id)
    invoice.printed_at = datetime.utcnow()
    db.commit()
    db.refresh(invoice)
    return {
        "success": True,
        "message": "Invoice marked as printed",
        "invoice": InvoiceResponse.model_validate(invoice),
    }


@router.put("/{invoice_id}/downloaded")
def mark_invoice_downloaded(invoice_id: int, db: db_dependency):
    invoice = get_invoice_or_404(db, invoice_id)
    invoice.downloaded_at = datetime.utcnow()
    db.commit()
    db.refresh(invoice)
    return {
        "success": True,
        "message": "Invoice marked as downloaded",
        "invoice": InvoiceResponse.model_validate(invoice),
    }


# ================= DELETE =================
@router.delete("/{invoice_id}")
def delete_invoice(invoice_id: int, db: db_dependency, admin: admin_dependency):
    invoice = get_invoice_or_404(db, invoice_id)
    invoice_number = invoice.invoice_number
    db.delete(invoice)
    db.commit()
    logger.info(f"Invoice {invoice_number} deleted by admin {admin['user_id']}")
    return {"success": True, "message": "Invoice deleted successfully"}
