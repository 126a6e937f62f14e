"""
Current-user dependencies

Sign-in is stubbed: every request acts as the configured demo user.
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.models.user import User
from curtaincall.services.user_service import UserService


async def get_current_user(db: Session = Depends(get_db)) -> Optional[User]:
    """
    Get the signed-in user

    Returns:
        The demo user, or None if that account does not exist
    """
    return UserService(db).current_user()


async def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    """Like get_current_user but fails with 401 when nobody is signed in"""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user
