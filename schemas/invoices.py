# schemas/invoices.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from models.invoices import InvoiceStatus
from models.orders import PaymentMethod, PaymentStatus


class InvoiceCreate(BaseModel):
    orderId: str = Field(..., min_length=1, description="Order code, or the numeric order id")


class InvoiceStatusUpdate(BaseModel):
    status: str


class InvoiceItemResponse(BaseModel):
    id: int
    title: str
    image: Optional[str] = None
    quantity: int
    price: float
    total: float

    class Config:
        from_attributes = True


class InvoiceResponse(BaseModel):
    id: int
    invoice_number: Optional[str] = None
    order_id: int
    order_code: str
    status: InvoiceStatus
    customer_name: str
    customer_email: str
    customer_phone: str
    full_address: str
    city: str
    state: str
    pincode: str
    subtotal: float
    shipping: float
    tax: float
    total: float
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    invoice_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    notes: Optional[str] = None
    terms_and_conditions: Optional[str] = None
    printed_at: Optional[datetime] = None
    downloaded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    items: List[InvoiceItemResponse] = []

    class Config:
        from_attributes = True
