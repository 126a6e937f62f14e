"""
Admin API routes for bookings
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from curtaincall.api.routes.bookings import BookingResponse
from curtaincall.core.database import get_db
from curtaincall.core.exceptions import BookingConflictError
from curtaincall.services.booking_service import BookingService

router = APIRouter(prefix="/api/admin/bookings", tags=["admin"])


@router.get("", response_model=List[BookingResponse])
async def list_bookings(
    search: Optional[str] = None,
    show_id: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List bookings, most recently made first"""
    bookings = BookingService(db).list_admin(search=search, show_id=show_id, status=status)
    return [b.to_dict() for b in bookings]


@router.get("/shows")
async def list_booked_shows(db: Session = Depends(get_db)):
    """Shows that appear in bookings, for the filter drop-down"""
    return [{"id": show_id, "title": title} for show_id, title in BookingService(db).show_titles()]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: str, db: Session = Depends(get_db)):
    booking = BookingService(db).get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail=f"Booking {booking_id} not found")
    return booking.to_dict()


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(booking_id: str, db: Session = Depends(get_db)):
    try:
        booking = BookingService(db).cancel_booking(booking_id)
    except BookingConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not booking:
        raise HTTPException(status_code=404, detail=f"Booking {booking_id} not found")
    return booking.to_dict()


@router.post("/{booking_id}/refund", response_model=BookingResponse)
async def refund_booking(booking_id: str, db: Session = Depends(get_db)):
    try:
        booking = BookingService(db).refund_booking(booking_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not booking:
        raise HTTPException(status_code=404, detail=f"Booking {booking_id} not found")
    return booking.to_dict()
