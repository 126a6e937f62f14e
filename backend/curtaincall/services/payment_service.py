"""
Payment Service for transaction records and refunds
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from curtaincall.core.config import get_settings
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.core.metrics import refunds_total
from curtaincall.models.booking import Booking, PaymentState
from curtaincall.models.payment import Payment, PaymentStatus
from curtaincall.utils.datetime_utils import end_of_day, start_of_day, utc_now
from curtaincall.utils.ids import new_id

logger = LoggingConfig.get_logger(__name__)

REFUNDABLE_STATUSES = (PaymentStatus.SUCCEEDED.value, PaymentStatus.PARTIALLY_REFUNDED.value)


class PaymentService:
    """Service for payment transactions"""

    def __init__(self, db: Session):
        self.db = db

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        return self.db.get(Payment, payment_id)

    def payment_for_booking(self, booking_id: str) -> Optional[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.booking_id == booking_id)
            .order_by(Payment.created_at.desc())
            .first()
        )

    def list_admin(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[Payment]:
        """
        Transactions for the back-office, newest first

        Args:
            search: Matched against id, booking id, user name, method and show title
            status: Payment status or 'all'
            date_from: Start of range; only applied together with date_to
            date_to: End of range; the whole end day is included
        """
        query = self.db.query(Payment)

        if status and status.lower() != "all":
            query = query.filter(Payment.status == status.lower())

        if date_from and date_to:
            query = query.filter(
                Payment.created_at >= start_of_day(date_from),
                Payment.created_at <= end_of_day(date_to),
            )

        payments = query.order_by(Payment.created_at.desc()).all()

        if search:
            q = search.lower()
            payments = [
                p for p in payments
                if q in p.id.lower()
                or q in p.booking_id.lower()
                or q in p.user_name.lower()
                or q in p.payment_method.lower()
                or q in (p.show_title or "").lower()
            ]

        return payments

    def record_payment(self, booking: Booking, method: str = "Card") -> Payment:
        """Add a succeeded payment for a booking; the caller commits"""
        payment = Payment(
            id=new_id("pi"),
            booking_id=booking.id,
            user_id=booking.user_id,
            user_name=booking.user_name,
            amount=booking.total_price,
            currency=get_settings().currency,
            status=PaymentStatus.SUCCEEDED.value,
            payment_method=method,
            created_at=utc_now(),
            show_title=booking.show_title,
        )
        self.db.add(payment)
        return payment

    def apply_refund(self, payment: Payment, amount: Optional[float] = None) -> Payment:
        """
        Refund a payment in full or in part without committing

        A positive amount below what is left is a partial refund and accumulates
        on refund_amount; anything else refunds the full remaining amount.

        Raises:
            ValueError: If the payment is not in a refundable state
        """
        if payment.status not in REFUNDABLE_STATUSES:
            raise ValueError(f"Payment {payment.id} cannot be refunded (status: {payment.status})")

        remaining = payment.refundable_amount
        if amount is not None and 0 < amount < remaining:
            payment.refund_amount = round((payment.refund_amount or 0.0) + amount, 2)
            payment.status = PaymentStatus.PARTIALLY_REFUNDED.value
            refunds_total.labels(kind="partial").inc()
            logger.info(f"Partial refund of {amount:.2f} on payment {payment.id}")
        else:
            payment.refund_amount = payment.amount
            payment.status = PaymentStatus.REFUNDED.value
            refunds_total.labels(kind="full").inc()
            logger.info(f"Full refund of {remaining:.2f} on payment {payment.id}")
        return payment

    def trigger_refund(self, payment_id: str, amount: Optional[float] = None) -> Optional[Payment]:
        """
        Refund a payment from the back-office

        Args:
            payment_id: Payment to refund
            amount: Partial amount; None or anything not below the remaining amount means a full refund

        Returns:
            Updated payment, or None if it does not exist
        """
        payment = self.get_payment(payment_id)
        if not payment:
            return None
        self.apply_refund(payment, amount)
        if payment.status == PaymentStatus.REFUNDED.value and payment.booking_id:
            booking = self.db.get(Booking, payment.booking_id)
            if booking:
                booking.payment_status = PaymentState.REFUNDED.value
        self.db.commit()
        self.db.refresh(payment)
        return payment
