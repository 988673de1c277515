"""Payment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class PaymentCreate(BaseModel):
    bookingId: Optional[int] = None
    amount: float
    currency: str = "USD"
    stripePaymentIntentId: Optional[str] = None
    paymentMethod: Optional[str] = None
    status: str = "pending"

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v):
        if v < 0:
            raise ValueError("Amount cannot be negative")
        return v

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v):
        return (v or "USD").upper()


class PaymentStatusUpdate(BaseModel):
    status: Optional[str] = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    booking_id: Optional[int] = None
    user_id: str
    amount: float
    currency: str
    stripe_payment_intent_id: Optional[str] = None
    payment_method: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentCreatedResponse(BaseModel):
    message: str
    paymentId: int
