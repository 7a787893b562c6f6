# schemas/orders.py
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime

from models.orders import OrderStatus, PaymentMethod, PaymentStatus


class OrderItemIn(BaseModel):
    productId: Optional[int] = None
    title: str = Field(..., min_length=1)
    image: Optional[str] = None
    category: Optional[str] = None
    slug: Optional[str] = None
    brand: Optional[str] = None
    price: float = Field(..., ge=0)
    originalPrice: Optional[float] = Field(None, ge=0)
    quantity: int = Field(..., ge=1)


class CustomerIn(BaseModel):
    fullName: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    userId: Optional[int] = None

    @field_validator("fullName", "phone", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _lower_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class AddressIn(BaseModel):
    fullAddress: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)

    @field_validator("fullAddress", "city", "state", "pincode", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class PricingIn(BaseModel):
    subtotal: float = Field(..., ge=0)
    shipping: float = Field(0, ge=0)
    tax: float = Field(0, ge=0)
    total: float = Field(..., ge=0)


class PaymentIn(BaseModel):
    method: PaymentMethod = PaymentMethod.COD
    status: PaymentStatus = PaymentStatus.PENDING
    transactionId: Optional[str] = None


class OrderCreate(BaseModel):
    items: List[OrderItemIn] = Field(..., min_length=1)
    customer: CustomerIn
    address: AddressIn
    pricing: PricingIn
    payment: PaymentIn = PaymentIn()


class OrderStatusUpdate(BaseModel):
    orderStatus: str


class PaymentStatusUpdate(BaseModel):
    paymentStatus: str
    transactionId: Optional[str] = None


class OrderItemResponse(BaseModel):
    id: int
    product_id: Optional[int] = None
    product_title: str
    product_image: Optional[str] = None
    category: Optional[str] = None
    slug: Optional[str] = None
    brand: Optional[str] = None
    price: float
    original_price: Optional[float] = None
    quantity: int
    subtotal: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    order_code: Optional[str] = None
    order_status: OrderStatus
    customer_name: str
    customer_email: str
    customer_phone: str
    user_id: Optional[int] = None
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
    transaction_id: Optional[str] = None
    gateway_order_id: Optional[str] = None
    payment_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True
