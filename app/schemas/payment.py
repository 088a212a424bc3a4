# app/schemas/payment.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.db.models.payment import PaymentStatus


class PaymentCreate(BaseModel):
    booking_id: int
    amount: float = Field(..., gt=0)
    method: str


class PaymentUpdate(BaseModel):
    status: PaymentStatus
    transaction_id: Optional[str] = None


class MarkPaid(BaseModel):
    method: str
    transaction_id: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    booking_id: int
    amount: float
    method: Optional[str] = None
    transaction_id: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    class Config:
        from_attributes = True
