"""
Payment transaction model
"""
from enum import Enum

from sqlalchemy import Column, Float, String

from curtaincall.core.database import Base, UTCDateTime
from curtaincall.utils.datetime_utils import to_iso_z, utc_now


class PaymentStatus(str, Enum):
    """Payment transaction status enumeration"""
    SUCCEEDED = "succeeded"
    PENDING = "pending"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


class Payment(Base):
    """Payment transaction recorded for a booking"""
    __tablename__ = "payments"

    id = Column(String(64), primary_key=True)
    booking_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=False)
    user_name = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    status = Column(String(32), nullable=False, default=PaymentStatus.PENDING.value, index=True)
    payment_method = Column(String(32), nullable=False, default="Card")
    created_at = Column(UTCDateTime, nullable=False, default=utc_now, index=True)
    refund_amount = Column(Float, nullable=True)
    show_title = Column(String(255), nullable=True)

    @property
    def refundable_amount(self) -> float:
        return round(self.amount - (self.refund_amount or 0.0), 2)

    @property
    def net_amount(self) -> float:
        """Amount kept after refunds; zero for payments that never succeeded"""
        if self.status not in (PaymentStatus.SUCCEEDED.value, PaymentStatus.PARTIALLY_REFUNDED.value):
            return 0.0
        return self.refundable_amount

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "booking_id": self.booking_id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "amount": self.amount,
            "currency": self.currency,
            "status": self.status,
            "payment_method": self.payment_method,
            "created_at": to_iso_z(self.created_at),
            "refund_amount": self.refund_amount,
            "show_title": self.show_title,
        }

    def __repr__(self):
        return f"<Payment(id={self.id}, amount={self.amount}, status={self.status})>"
