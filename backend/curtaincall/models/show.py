"""
Show model for theatre productions
"""
from enum import Enum

from sqlalchemy import JSON, Column, Float, String, Text

from curtaincall.core.database import Base
from curtaincall.utils.datetime_utils import parse_iso


class ShowStatus(str, Enum):
    """Show status enumeration"""
    UPCOMING = "upcoming"
    ACTIVE = "active"
    CLOSED = "closed"
    ENDED = "ended"


class Show(Base):
    """A drama show with its cast and performance schedule"""
    __tablename__ = "shows"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False, index=True)
    cast = Column(JSON, nullable=False, default=list)  # list of actor names
    genre = Column(String(100), nullable=False, index=True)
    rating = Column(Float, nullable=False, default=0.0)
    description = Column(Text, nullable=False, default="")
    status = Column(String(20), nullable=False, default=ShowStatus.UPCOMING.value, index=True)
    schedule = Column(JSON, nullable=False, default=list)  # sorted ISO-8601 UTC strings
    venue = Column(String(255), nullable=False)

    @property
    def performances(self):
        """Schedule as aware datetimes, ascending"""
        return sorted(parse_iso(s) for s in (self.schedule or []))

    @property
    def is_bookable(self) -> bool:
        return self.status == ShowStatus.ACTIVE.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "cast": list(self.cast or []),
            "genre": self.genre,
            "rating": self.rating,
            "description": self.description,
            "status": self.status,
            "schedule": list(self.schedule or []),
            "venue": self.venue,
        }

    def __repr__(self):
        return f"<Show(id={self.id}, title={self.title}, status={self.status})>"
