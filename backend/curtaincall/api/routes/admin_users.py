"""
Admin API routes for user accounts
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.services.user_service import UserService

router = APIRouter(prefix="/api/admin/users", tags=["admin"])


class UserStatusRequest(BaseModel):
    status: str = Field(..., description="active, suspended or pending_verification")


@router.get("")
async def list_users(search: Optional[str] = None, db: Session = Depends(get_db)):
    return [u.to_dict() for u in UserService(db).list_users(search=search)]


@router.get("/{user_id}")
async def get_user(user_id: str, db: Session = Depends(get_db)):
    user = UserService(db).get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user.to_dict()


@router.put("/{user_id}/status")
async def update_user_status(user_id: str, request: UserStatusRequest, db: Session = Depends(get_db)):
    try:
        user = UserService(db).update_status(user_id, request.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not user:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user.to_dict()


@router.delete("/{user_id}")
async def delete_user(user_id: str, db: Session = Depends(get_db)):
    if not UserService(db).delete_user(user_id):
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return {"message": f"User {user_id} deleted"}
