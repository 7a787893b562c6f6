# models/invoices.py
from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from db.database import Base
from datetime import datetime, timedelta
import enum

from models.orders import PaymentMethod, PaymentStatus

PAYMENT_TERM_DAYS = 30


class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    SENT = "sent"
    VIEWED = "viewed"
    PAID = "paid"
    CANCELLED = "cancelled"


def _due_date():
    return datetime.utcnow() + timedelta(days=PAYMENT_TERM_DAYS)


class Invoice(Base):
    """Snapshot of an order at billing time; later order edits do not change it."""
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(40), unique=True, nullable=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    order_code = Column(String(40), nullable=False)
    status = Column(Enum(InvoiceStatus), default=InvoiceStatus.ISSUED, nullable=False)

    # Customer
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_phone = Column(String(50), nullable=False)

    # Billing address
    full_address = Column(Text, nullable=False)
    city = Column(String(120), nullable=False)
    state = Column(String(120), nullable=False)
    pincode = Column(String(20), nullable=False)

    # Pricing
    subtotal = Column(Float, nullable=False)
    shipping = Column(Float, default=0)
    tax = Column(Float, nullable=False)
    total = Column(Float, nullable=False)

    # Payment
    payment_method = Column(Enum(PaymentMethod), nullable=False)
    payment_status = Column(Enum(PaymentStatus), nullable=False)

    invoice_date = Column(DateTime, default=datetime.utcnow)
    due_date = Column(DateTime, default=_due_date)
    notes = Column(Text, nullable=True)
    terms_and_conditions = Column(Text, nullable=True)

    printed_at = Column(DateTime, nullable=True)
    downloaded_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan")


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)

    title = Column(String(255), nullable=False)
    image = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    total = Column(Float, nullable=False)

    invoice = relationship("Invoice", back_populates="items")
