"""
Admin API routes for payment transactions
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.services.payment_service import PaymentService
from curtaincall.utils.datetime_utils import parse_optional_date

router = APIRouter(prefix="/api/admin/payments", tags=["admin"])
logger = LoggingConfig.get_logger(__name__)


class RefundRequest(BaseModel):
    amount: Optional[float] = Field(None, description="Partial amount; omit for a full refund")


@router.get("")
async def list_payments(
    search: Optional[str] = None,
    status: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List transactions, newest first"""
    try:
        start = parse_optional_date(date_from)
        end = parse_optional_date(date_to)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid date: {e}")
    payments = PaymentService(db).list_admin(search=search, status=status, date_from=start, date_to=end)
    return [p.to_dict() for p in payments]


@router.post("/{payment_id}/refund")
async def refund_payment(
    payment_id: str,
    request: Optional[RefundRequest] = None,
    db: Session = Depends(get_db),
):
    """Refund a payment in full, or in part when an amount is given"""
    amount = request.amount if request else None
    try:
        payment = PaymentService(db).trigger_refund(payment_id, amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not payment:
        raise HTTPException(status_code=404, detail=f"Payment {payment_id} not found")
    return payment.to_dict()
