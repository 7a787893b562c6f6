# schemas/payments.py
from pydantic import BaseModel, Field
from typing import Optional


class CreatePaymentOrder(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    orderId: str = Field(..., min_length=1)
    customerEmail: Optional[str] = None
    customerName: Optional[str] = None


class VerifyPayment(BaseModel):
    razorpayPaymentId: str = Field(..., min_length=1)
    razorpayOrderId: str = Field(..., min_length=1)
    razorpaySignature: str = Field(..., min_length=1)
    orderId: Optional[str] = None


class RefundRequest(BaseModel):
    paymentId: str = Field(..., min_length=1)
    amount: Optional[float] = Field(None, gt=0)
    reason: Optional[str] = None
