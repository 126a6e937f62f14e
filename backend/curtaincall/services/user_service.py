"""
User Service for account records and the demo profile
"""
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import func
from sqlalchemy.orm import Session

from curtaincall.core.config import get_settings
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.user import User, UserStatus
from curtaincall.models.wishlist import WishlistItem

logger = LoggingConfig.get_logger(__name__)


def normalize_email(email: str) -> str:
    """
    Validate an e-mail address and return its normalized form

    Raises:
        ValueError: If the address is not valid
    """
    try:
        return validate_email((email or "").strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email address: {e}") from e


class UserService:
    """Service for managing users"""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == (email or "").strip().lower())
            .first()
        )

    def current_user(self) -> Optional[User]:
        """The signed-in user; sign-in is stubbed to a fixed demo account"""
        return self.get_user(get_settings().demo_user_id)

    def list_users(self, search: Optional[str] = None) -> List[User]:
        users = self.db.query(User).order_by(User.created_at.desc()).all()
        if search:
            q = search.lower()
            users = [
                u for u in users
                if q in u.name.lower() or q in u.email.lower() or q in u.id.lower()
            ]
        return users

    def update_status(self, user_id: str, status: str) -> Optional[User]:
        """
        Set account status (active, suspended, pending_verification)

        Raises:
            ValueError: If the status is unknown
        """
        user = self.get_user(user_id)
        if not user:
            return None
        status = (status or "").lower()
        if status not in {s.value for s in UserStatus}:
            raise ValueError(f"Invalid user status '{status}'")
        user.status = status
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"User {user_id} status set to {status}")
        return user

    def delete_user(self, user_id: str) -> bool:
        user = self.get_user(user_id)
        if not user:
            return False
        self.db.query(WishlistItem).filter(WishlistItem.user_id == user_id).delete()
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user {user_id}")
        return True

    def update_profile(self, user: User, name: str, email: str) -> User:
        """
        Change a user's display name and e-mail

        Raises:
            ValueError: Name shorter than 2 characters, invalid or taken e-mail
        """
        name = (name or "").strip()
        if len(name) < 2:
            raise ValueError("Name must be at least 2 characters")
        email = normalize_email(email)

        other = self.get_user_by_email(email)
        if other and other.id != user.id:
            raise ValueError("Email is already in use by another account")

        user.name = name
        user.email = email
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Profile updated for {user.id}")
        return user
