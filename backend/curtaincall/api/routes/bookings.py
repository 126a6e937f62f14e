"""
API routes for the signed-in user's bookings
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from curtaincall.core.auth import require_user
from curtaincall.core.database import get_db
from curtaincall.core.exceptions import BookingConflictError
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.user import User
from curtaincall.services.booking_service import BookingService
from curtaincall.utils.datetime_utils import parse_iso

router = APIRouter(prefix="/api/bookings", tags=["bookings"])
logger = LoggingConfig.get_logger(__name__)


class BookingResponse(BaseModel):
    """Response model for a booking"""
    id: str
    show_id: str
    show_title: str
    user_id: str
    user_name: str
    venue: str
    schedule: str
    seats: List[str]
    total_price: float
    booking_date: str
    status: str
    payment_status: str
    discount_code: Optional[str] = None


class MyBookingsResponse(BaseModel):
    upcoming: List[BookingResponse]
    past: List[BookingResponse]


class BookingCreateRequest(BaseModel):
    """Request model for booking seats"""
    show_id: str = Field(..., description="Show to book")
    schedule: str = Field(..., description="Performance start, ISO-8601")
    seats: List[str] = Field(..., description="Seat ids, e.g. ['C9', 'C10']")
    discount_code: Optional[str] = Field(None, description="Optional discount code")


@router.get("", response_model=MyBookingsResponse)
async def list_my_bookings(db: Session = Depends(get_db), user: User = Depends(require_user)):
    """Bookings of the signed-in user, split into upcoming and past"""
    upcoming, past = BookingService(db).list_user_bookings(user.id)
    return {
        "upcoming": [b.to_dict() for b in upcoming],
        "past": [b.to_dict() for b in past],
    }


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    request: BookingCreateRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    """Book seats and pay for them in one step"""
    try:
        schedule = parse_iso(request.schedule)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid schedule '{request.schedule}'")

    try:
        booking = BookingService(db).create_booking(
            user, request.show_id, schedule, request.seats, request.discount_code
        )
    except BookingConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not booking:
        raise HTTPException(status_code=404, detail=f"Show {request.show_id} not found")
    return booking.to_dict()
