"""
Review model
"""
from sqlalchemy import Boolean, Column, Integer, String, Text

from curtaincall.core.database import Base, UTCDateTime
from curtaincall.utils.datetime_utils import to_iso_z, utc_now


class Review(Base):
    """A user's rating and comment on a show"""
    __tablename__ = "reviews"

    id = Column(String(64), primary_key=True)
    show_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_avatar = Column(String(512), nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now, index=True)
    likes = Column(Integer, nullable=False, default=0)
    is_blocked = Column(Boolean, nullable=False, default=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "show_id": self.show_id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "user_avatar": self.user_avatar,
            "rating": self.rating,
            "comment": self.comment,
            "created_at": to_iso_z(self.created_at),
            "likes": self.likes,
            "is_blocked": self.is_blocked,
        }

    def __repr__(self):
        return f"<Review(id={self.id}, show_id={self.show_id}, rating={self.rating})>"
