"""
Booking model
"""
from enum import Enum

from sqlalchemy import JSON, Column, Float, String

from curtaincall.core.database import Base, UTCDateTime
from curtaincall.utils.datetime_utils import to_iso_z, utc_now


class BookingStatus(str, Enum):
    """Booking status enumeration"""
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    PENDING = "pending"


class PaymentState(str, Enum):
    """Payment state of a booking"""
    PAID = "paid"
    PENDING = "pending"
    FAILED = "failed"
    REFUNDED = "refunded"


class Booking(Base):
    """Seats reserved by a user for one performance of a show"""
    __tablename__ = "bookings"

    id = Column(String(64), primary_key=True)
    show_id = Column(String(64), nullable=False, index=True)
    show_title = Column(String(255), nullable=False)
    user_id = Column(String(64), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    venue = Column(String(255), nullable=False)
    schedule = Column(UTCDateTime, nullable=False, index=True)
    seats = Column(JSON, nullable=False, default=list)
    total_price = Column(Float, nullable=False, default=0.0)
    booking_date = Column(UTCDateTime, nullable=False, default=utc_now)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    payment_status = Column(String(20), nullable=False, default=PaymentState.PENDING.value)
    discount_code = Column(String(64), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "show_id": self.show_id,
            "show_title": self.show_title,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "venue": self.venue,
            "schedule": to_iso_z(self.schedule),
            "seats": list(self.seats or []),
            "total_price": self.total_price,
            "booking_date": to_iso_z(self.booking_date),
            "status": self.status,
            "payment_status": self.payment_status,
            "discount_code": self.discount_code,
        }

    def __repr__(self):
        return f"<Booking(id={self.id}, show_id={self.show_id}, status={self.status})>"
