"""
Admin API routes for review moderation
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.services.review_service import ReviewService

router = APIRouter(prefix="/api/admin/reviews", tags=["admin"])


@router.get("")
async def list_reviews(
    show_id: Optional[str] = None,
    rating: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """List reviews including blocked ones, newest first"""
    return [r.to_dict() for r in ReviewService(db).list_admin(show_id=show_id, rating=rating)]


@router.get("/shows")
async def list_reviewed_shows(db: Session = Depends(get_db)):
    return [{"id": show_id, "title": title} for show_id, title in ReviewService(db).reviewed_shows()]


@router.delete("/{review_id}")
async def delete_review(review_id: str, db: Session = Depends(get_db)):
    if not ReviewService(db).delete_review(review_id):
        raise HTTPException(status_code=404, detail=f"Review {review_id} not found")
    return {"message": f"Review {review_id} deleted"}


@router.post("/{review_id}/block")
async def block_review(review_id: str, db: Session = Depends(get_db)):
    """Hide a review from the public show page"""
    if not ReviewService(db).block_review(review_id):
        raise HTTPException(status_code=404, detail=f"Review {review_id} not found")
    return {"message": f"Review {review_id} blocked"}
