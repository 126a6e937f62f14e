"""
Discount code model
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, Integer, String, Text

from curtaincall.core.database import Base, UTCDateTime
from curtaincall.utils.datetime_utils import to_iso_z, utc_now


class Discount(Base):
    """Percentage discount redeemable with a code at checkout"""
    __tablename__ = "discounts"

    id = Column(String(64), primary_key=True)
    code = Column(String(64), unique=True, nullable=False, index=True)
    discount_percentage = Column(Integer, nullable=False)
    description = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    valid_from = Column(UTCDateTime, nullable=True)
    valid_until = Column(UTCDateTime, nullable=True)
    usage_limit = Column(Integer, nullable=True)
    times_used = Column(Integer, nullable=False, default=0)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)

    def is_redeemable(self, now: Optional[datetime] = None) -> bool:
        """Active, inside its validity window and below its usage limit"""
        now = now or utc_now()
        if not self.is_active:
            return False
        if self.valid_from is not None and self.valid_from > now:
            return False
        if self.valid_until is not None and self.valid_until <= now:
            return False
        if self.usage_limit is not None and (self.times_used or 0) >= self.usage_limit:
            return False
        return True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "discount_percentage": self.discount_percentage,
            "description": self.description,
            "is_active": self.is_active,
            "valid_from": to_iso_z(self.valid_from) if self.valid_from else None,
            "valid_until": to_iso_z(self.valid_until) if self.valid_until else None,
            "usage_limit": self.usage_limit,
            "times_used": self.times_used,
            "created_at": to_iso_z(self.created_at),
        }

    def __repr__(self):
        return f"<Discount(code={self.code}, pct={self.discount_percentage}, active={self.is_active})>"
