"""Payment service - recording payments against bookings"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Payment
from ...schemas import Role
from ...shared.clock import Clock, utcnow
from ...shared.errors import NotFoundError, ValidationError
from ..bookings import policy
from .repository import PaymentRepository
from .schemas import PaymentCreate

logger = logging.getLogger(__name__)

PAYMENT_STATUSES = ("pending", "succeeded", "failed", "cancelled")


class PaymentService:
    """Service layer for payment records"""

    def __init__(self, db: Session, clock: Clock = utcnow):
        self.db = db
        self.clock = clock
        self.repo = PaymentRepository()

    def create_payment(self, caller_id: str, data: PaymentCreate) -> Payment:
        if data.status not in PAYMENT_STATUSES:
            raise ValidationError("Invalid status")
        now = self.clock()
        payment = self.repo.create_payment(
            self.db,
            booking_id=data.bookingId,
            user_id=caller_id,
            amount=data.amount,
            currency=data.currency,
            stripe_payment_intent_id=data.stripePaymentIntentId,
            payment_method=data.paymentMethod,
            status=data.status,
            created_at=now,
            updated_at=now,
        )
        logger.info(f"💳 Payment {payment.id} recorded for booking {data.bookingId} by {caller_id}")
        return payment

    def list_for_user(self, caller_id: str, caller_role: Role, user_id: str) -> list[Payment]:
        policy.check_list_for_user(caller_id, caller_role, user_id)
        return self.repo.get_user_payments(self.db, user_id)

    def update_status(self, caller_role: Role, payment_id: int, status: Optional[str]) -> Payment:
        policy.check_staff(caller_role)
        if status not in PAYMENT_STATUSES:
            raise ValidationError("Invalid status")
        payment = self.repo.get_payment(self.db, payment_id)
        if not payment:
            raise NotFoundError("Payment not found")
        payment.status = status
        payment.updated_at = self.clock()
        return self.repo.save(self.db, payment)
