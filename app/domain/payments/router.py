"""Payment router - FastAPI endpoints for payment records"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import Caller, get_current_caller, require_staff
from ...database import get_db
from ...schemas import MessageResponse
from ...shared.clock import Clock, get_clock
from ...shared.validators import parse_int_id
from .schemas import PaymentCreate, PaymentCreatedResponse, PaymentResponse, PaymentStatusUpdate
from .service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


def get_payment_service(
    db: Session = Depends(get_db), clock: Clock = Depends(get_clock)
) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db, clock)


@router.post("", response_model=PaymentCreatedResponse, status_code=201)
async def create_payment(
    data: PaymentCreate,
    caller: Caller = Depends(get_current_caller),
    service: PaymentService = Depends(get_payment_service),
):
    payment = service.create_payment(caller.uid, data)
    return PaymentCreatedResponse(message="Payment created successfully", paymentId=payment.id)


@router.get("/user/{user_id}", response_model=list[PaymentResponse])
async def get_user_payments(
    user_id: str,
    caller: Caller = Depends(get_current_caller),
    service: PaymentService = Depends(get_payment_service),
):
    payments = service.list_for_user(caller.uid, caller.role, user_id)
    return [PaymentResponse.model_validate(p) for p in payments]


@router.patch("/{payment_id}/status", response_model=MessageResponse)
async def update_payment_status(
    payment_id: str,
    data: PaymentStatusUpdate,
    caller: Caller = Depends(require_staff),
    service: PaymentService = Depends(get_payment_service),
):
    service.update_status(caller.role, parse_int_id(payment_id, "payment"), data.status)
    return MessageResponse(message="Payment status updated successfully")
