"""
API routes for the signed-in user's wishlist
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from curtaincall.core.auth import require_user
from curtaincall.core.database import get_db
from curtaincall.models.user import User
from curtaincall.services.wishlist_service import WishlistService

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


class WishlistAddRequest(BaseModel):
    show_id: str = Field(..., description="Show to save")


@router.get("")
async def list_wishlist(db: Session = Depends(get_db), user: User = Depends(require_user)):
    return [s.to_dict() for s in WishlistService(db).list_wishlist(user.id)]


@router.post("", status_code=201)
async def add_to_wishlist(
    request: WishlistAddRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    if not WishlistService(db).add(user.id, request.show_id):
        raise HTTPException(status_code=404, detail=f"Show {request.show_id} not found")
    return {"show_id": request.show_id, "wishlisted": True}


@router.delete("/{show_id}")
async def remove_from_wishlist(
    show_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    if not WishlistService(db).remove(user.id, show_id):
        raise HTTPException(status_code=404, detail=f"Show {show_id} is not in the wishlist")
    return {"show_id": show_id, "wishlisted": False}
