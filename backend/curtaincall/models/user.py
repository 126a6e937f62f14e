"""
User model
"""
from enum import Enum

from sqlalchemy import Column, Integer, String

from curtaincall.core.database import Base, UTCDateTime
from curtaincall.utils.datetime_utils import to_iso_z, utc_now


class UserRole(str, Enum):
    """User role enumeration"""
    USER = "user"
    ORGANIZER = "organizer"
    HANDLER = "handler"


class UserStatus(str, Enum):
    """Account status enumeration"""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    PENDING_VERIFICATION = "pending_verification"


class User(Base):
    """Platform user (customers, organizers and box-office handlers)"""
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    avatar_url = Column(String(512), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    status = Column(String(32), nullable=False, default=UserStatus.ACTIVE.value)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    last_login = Column(UTCDateTime, nullable=True)
    booking_count = Column(Integer, nullable=False, default=0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar_url": self.avatar_url,
            "role": self.role,
            "status": self.status,
            "created_at": to_iso_z(self.created_at),
            "last_login": to_iso_z(self.last_login) if self.last_login else None,
            "booking_count": self.booking_count,
        }

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
