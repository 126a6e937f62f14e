"""
Wishlist Service
"""
from typing import List

from sqlalchemy.orm import Session

from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.show import Show
from curtaincall.models.wishlist import WishlistItem
from curtaincall.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)


class WishlistService:
    """Service for shows a user saved for later"""

    def __init__(self, db: Session):
        self.db = db

    def list_wishlist(self, user_id: str) -> List[Show]:
        shows = (
            self.db.query(Show)
            .join(WishlistItem, WishlistItem.show_id == Show.id)
            .filter(WishlistItem.user_id == user_id)
            .all()
        )
        return sorted(shows, key=lambda s: s.title.lower())

    def is_wishlisted(self, user_id: str, show_id: str) -> bool:
        return self.db.get(WishlistItem, (user_id, show_id)) is not None

    def add(self, user_id: str, show_id: str) -> bool:
        """
        Save a show; adding it twice is a no-op

        Returns:
            False if the show does not exist
        """
        if self.db.get(Show, show_id) is None:
            return False
        if self.is_wishlisted(user_id, show_id):
            return True
        self.db.add(WishlistItem(user_id=user_id, show_id=show_id, created_at=utc_now()))
        self.db.commit()
        logger.info(f"User {user_id} added {show_id} to wishlist")
        return True

    def remove(self, user_id: str, show_id: str) -> bool:
        item = self.db.get(WishlistItem, (user_id, show_id))
        if item is None:
            return False
        self.db.delete(item)
        self.db.commit()
        logger.info(f"User {user_id} removed {show_id} from wishlist")
        return True
