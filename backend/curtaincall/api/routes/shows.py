"""
API routes for the public show catalogue, seat maps, quotes and reviews
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from curtaincall.core.auth import get_current_user, require_user
from curtaincall.core.database import get_db
from curtaincall.core.exceptions import InvalidDiscountError
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.user import User
from curtaincall.services import seating
from curtaincall.services.booking_service import BookingService
from curtaincall.services.review_service import ReviewService
from curtaincall.services.show_service import ShowService, share_links
from curtaincall.services.wishlist_service import WishlistService
from curtaincall.utils.datetime_utils import parse_iso, to_iso_z

router = APIRouter(prefix="/api/shows", tags=["shows"])
logger = LoggingConfig.get_logger(__name__)


class ShowResponse(BaseModel):
    """Response model for a show"""
    id: str
    title: str
    cast: List[str]
    genre: str
    rating: float
    description: str
    status: str
    schedule: List[str]
    venue: str


class ShowDetailResponse(ShowResponse):
    """Show with everything the detail page needs"""
    average_rating: float
    review_count: int
    upcoming_schedule: List[str]
    is_bookable: bool
    is_wishlisted: bool
    share: Dict[str, str]


class ReviewResponse(BaseModel):
    id: str
    show_id: str
    user_id: str
    user_name: str
    user_avatar: Optional[str] = None
    rating: int
    comment: str
    created_at: str
    likes: int


class ReviewCreateRequest(BaseModel):
    """Request model for submitting a review"""
    rating: int = Field(..., description="Stars, 1 to 5")
    comment: str = Field(..., description="Review text, 10 to 500 characters")


class QuoteRequest(BaseModel):
    """Request model for pricing a seat selection"""
    seats: List[str] = Field(default_factory=list, description="Selected seat ids")
    discount_code: Optional[str] = Field(None, description="Optional discount code")


class SeatMapResponse(BaseModel):
    show_id: str
    schedule: str
    booked: List[str]
    layout: Dict[str, Any]


def _get_show_or_404(db: Session, show_id: str):
    show = ShowService(db).get_show(show_id)
    if not show:
        raise HTTPException(status_code=404, detail=f"Show {show_id} not found")
    return show


@router.get("", response_model=List[ShowResponse])
async def list_shows(
    status: Optional[str] = Query(None, description="'active', 'upcoming' or 'all'"),
    genre: Optional[str] = Query(None, description="Genre or 'all'"),
    q: Optional[str] = Query(None, description="Search text"),
    db: Session = Depends(get_db),
):
    """List active and upcoming shows"""
    shows = ShowService(db).list_public(status=status, genre=genre, query=q)
    return [s.to_dict() for s in shows]


@router.get("/genres", response_model=List[str])
async def list_genres(db: Session = Depends(get_db)):
    return ShowService(db).genres()


@router.get("/{show_id}", response_model=ShowDetailResponse)
async def get_show(
    show_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    """Get a show with its rating summary, future performances and share links"""
    show = _get_show_or_404(db, show_id)
    reviews = ReviewService(db)
    page_url = str(request.url_for("show_detail_page", show_id=show.id))
    return {
        **show.to_dict(),
        "average_rating": reviews.average_rating(show),
        "review_count": len(reviews.reviews_for_show(show.id)),
        "upcoming_schedule": [to_iso_z(d) for d in ShowService.upcoming_schedule(show)],
        "is_bookable": show.is_bookable,
        "is_wishlisted": bool(user) and WishlistService(db).is_wishlisted(user.id, show.id),
        "share": share_links(show.title, page_url),
    }


@router.get("/{show_id}/reviews", response_model=List[ReviewResponse])
async def list_reviews(show_id: str, db: Session = Depends(get_db)):
    _get_show_or_404(db, show_id)
    return [r.to_dict() for r in ReviewService(db).reviews_for_show(show_id)]


@router.post("/{show_id}/reviews", response_model=ReviewResponse, status_code=201)
async def submit_review(
    show_id: str,
    request: ReviewCreateRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    """Submit a review as the signed-in user"""
    try:
        review = ReviewService(db).submit_review(user, show_id, request.rating, request.comment)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not review:
        raise HTTPException(status_code=404, detail=f"Show {show_id} not found")
    return review.to_dict()


@router.get("/{show_id}/seats", response_model=SeatMapResponse)
async def get_seat_map(
    show_id: str,
    schedule: Optional[str] = Query(None, description="Performance start (ISO-8601); defaults to the next one"),
    db: Session = Depends(get_db),
):
    """Seat map for one performance with booked seats marked"""
    show = _get_show_or_404(db, show_id)
    if schedule:
        try:
            performance = parse_iso(schedule)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid schedule '{schedule}'")
    else:
        performance = ShowService.default_schedule(show)
        if performance is None:
            raise HTTPException(status_code=400, detail="This show has no performances")

    booked = BookingService(db).booked_seats(show.id, performance)
    return {
        "show_id": show.id,
        "schedule": to_iso_z(performance),
        "booked": seating.sort_seats(booked),
        "layout": seating.layout(booked, []),
    }


@router.post("/{show_id}/quote")
async def quote_selection(show_id: str, request: QuoteRequest, db: Session = Depends(get_db)):
    """Price a seat selection, optionally with a discount code"""
    _get_show_or_404(db, show_id)
    seats = seating.normalize_seats(request.seats)
    try:
        return BookingService(db).quote(len(seats), request.discount_code)
    except InvalidDiscountError as e:
        raise HTTPException(status_code=400, detail=str(e))
