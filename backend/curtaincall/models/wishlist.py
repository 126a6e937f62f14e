"""
Wishlist model
"""
from sqlalchemy import Column, String, UniqueConstraint

from curtaincall.core.database import Base, UTCDateTime
from curtaincall.utils.datetime_utils import utc_now


class WishlistItem(Base):
    """A show saved by a user for later"""
    __tablename__ = "wishlist_items"

    user_id = Column(String(64), primary_key=True)
    show_id = Column(String(64), primary_key=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)

    __table_args__ = (
        UniqueConstraint('user_id', 'show_id', name='uq_wishlist_user_show'),
    )

    def __repr__(self):
        return f"<WishlistItem(user_id={self.user_id}, show_id={self.show_id})>"
