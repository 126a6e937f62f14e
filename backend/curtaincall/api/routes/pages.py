"""
Page routes for the public site: browsing, booking, bookings, wishlist and profile
"""
from typing import List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from curtaincall.core.auth import get_current_user
from curtaincall.core.database import get_db
from curtaincall.core.exceptions import InvalidDiscountError
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.core.templates import (
    redirect_with_notice,
    render_template,
    split_message
)
from curtaincall.models.user import User
from curtaincall.services import seating
from curtaincall.services.account_service import AccountService
from curtaincall.services.booking_service import BookingService
from curtaincall.services.review_service import ReviewService
from curtaincall.services.settings_service import SettingsService
from curtaincall.services.show_service import ShowService, share_links
from curtaincall.services.user_service import UserService
from curtaincall.services.wishlist_service import WishlistService
from curtaincall.utils.datetime_utils import parse_iso, to_iso_z

router = APIRouter(tags=["pages"])
logger = LoggingConfig.get_logger(__name__)

LOGIN_REQUIRED = ("Login Required", "Please login to continue.")


def _book_url(show_id: str, schedule: Optional[str], seats: List[str], code: Optional[str]) -> str:
    params = {}
    if schedule:
        params["schedule"] = schedule
    if seats:
        params["seats"] = ",".join(seats)
    if code:
        params["code"] = code
    url = f"/shows/{show_id}/book"
    return f"{url}?{urlencode(params)}" if params else url


@router.get("/", response_class=HTMLResponse)
async def home_page(request: Request, db: Session = Depends(get_db)):
    """Home page with featured and upcoming shows"""
    shows = ShowService(db)
    return render_template(
        "index.html",
        {"featured": shows.featured(), "upcoming": shows.upcoming()},
        request,
    )


@router.get("/shows", response_class=HTMLResponse)
async def shows_page(
    request: Request,
    status: str = "all",
    genre: str = "all",
    q: str = "",
    db: Session = Depends(get_db),
):
    """Show listing with status, genre and text filters"""
    shows = ShowService(db)
    return render_template(
        "shows/list.html",
        {
            "shows": shows.list_public(status=status, genre=genre, query=q),
            "genres": shows.genres(),
            "filters": {"status": status, "genre": genre, "q": q},
        },
        request,
    )


@router.get("/shows/{show_id}", response_class=HTMLResponse)
async def show_detail_page(
    show_id: str,
    request: Request,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    show = ShowService(db).get_show(show_id)
    if not show:
        return redirect_with_notice("/shows", "Show Not Found", "The show you are looking for does not exist.", "destructive")

    reviews = ReviewService(db)
    return render_template(
        "shows/detail.html",
        {
            "show": show,
            "reviews": reviews.reviews_for_show(show.id),
            "average_rating": reviews.average_rating(show),
            "upcoming_schedule": ShowService.upcoming_schedule(show),
            "is_wishlisted": bool(user) and WishlistService(db).is_wishlisted(user.id, show.id),
            "share": share_links(show.title, str(request.url_for("show_detail_page", show_id=show.id))),
            "user": user,
        },
        request,
    )


@router.post("/shows/{show_id}/wishlist")
async def toggle_wishlist(
    show_id: str,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    """Add the show to the wishlist, or remove it if already there"""
    if not user:
        return redirect_with_notice("/login", *LOGIN_REQUIRED, variant="destructive")
    wishlist = WishlistService(db)
    if wishlist.is_wishlisted(user.id, show_id):
        wishlist.remove(user.id, show_id)
        return redirect_with_notice(f"/shows/{show_id}", "Wishlist", "Removed from wishlist.")
    if not wishlist.add(user.id, show_id):
        return redirect_with_notice("/shows", "Show Not Found", variant="destructive")
    return redirect_with_notice(f"/shows/{show_id}", "Wishlist", "Added to wishlist!")


@router.post("/shows/{show_id}/reviews")
async def submit_review_form(
    show_id: str,
    rating: int = Form(0),
    comment: str = Form(""),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    if not user:
        return redirect_with_notice("/login", *LOGIN_REQUIRED, variant="destructive")
    try:
        review = ReviewService(db).submit_review(user, show_id, rating, comment)
    except ValueError as e:
        return redirect_with_notice(f"/shows/{show_id}", "Submission Failed", str(e), "destructive")
    if not review:
        return redirect_with_notice("/shows", "Show Not Found", variant="destructive")
    return redirect_with_notice(f"/shows/{show_id}", "Review Submitted", "Thank you for your feedback!")


@router.get("/shows/{show_id}/book", response_class=HTMLResponse)
async def booking_page(
    show_id: str,
    request: Request,
    schedule: Optional[str] = None,
    seats: str = "",
    toggle: Optional[str] = None,
    code: str = "",
    apply_code: bool = False,
    db: Session = Depends(get_db),
):
    """
    Seat selection page

    The selection lives in the query string: each seat links back here with
    ``toggle=<seat>`` and the discount form submits ``code`` with ``apply_code``.
    """
    shows = ShowService(db)
    show = shows.get_show(show_id)
    if not show or not show.is_bookable:
        return redirect_with_notice(
            "/shows",
            "Booking Not Available",
            "This show is not currently available for booking.",
            "destructive",
        )

    performances = ShowService.upcoming_schedule(show)
    if not performances:
        return redirect_with_notice(
            f"/shows/{show.id}", "No Schedule Available",
            "There are no upcoming dates for this show.", "destructive",
        )

    performance = performances[0]
    if schedule:
        try:
            chosen = parse_iso(schedule)
        except ValueError:
            chosen = None
        if chosen in performances:
            performance = chosen

    booking_service = BookingService(db)
    max_seats = SettingsService(db).max_seats_per_booking()
    booked = booking_service.booked_seats(show.id, performance)
    selected = [
        s for s in seating.sort_seats(seating.normalize_seats(seats))
        if seating.is_valid_seat(s) and s not in booked
    ][:max_seats]

    notice = None
    if toggle:
        seat_id = toggle.strip().upper()
        if seating.is_valid_seat(seat_id) and seat_id not in booked:
            selected, limit_reached = seating.toggle_seat(selected, seat_id, max_seats)
            if limit_reached:
                notice = {
                    "title": "Seat Limit Reached",
                    "detail": f"You can select a maximum of {max_seats} seats per booking.",
                    "variant": "destructive",
                }

    discount = None
    code = code.strip().upper()
    if code:
        try:
            price = booking_service.quote(len(selected), code)
            discount = {"code": price["discount_code"], "percentage": price["discount_percentage"]}
            if apply_code:
                notice = {"title": "Discount Applied", "detail": f"{price['discount_percentage']}% off!", "variant": "default"}
        except InvalidDiscountError as e:
            title, detail = split_message(str(e))
            notice = {"title": title, "detail": detail, "variant": "destructive"}
            code = ""
            price = booking_service.quote(len(selected))
    else:
        price = booking_service.quote(len(selected))

    schedule_iso = to_iso_z(performance)
    context = {
        "show": show,
        "performances": performances,
        "performance": performance,
        "schedule_iso": schedule_iso,
        "layout": seating.layout(booked, selected),
        "selected": selected,
        "max_seats": max_seats,
        "price": price,
        "discount": discount,
        "code": code,
        "seat_url": lambda seat_id: _book_url(show.id, schedule_iso, selected, code) + f"&toggle={seat_id}",
    }
    if notice:
        context["notice"] = notice
    return render_template("shows/book.html", context, request)


@router.post("/shows/{show_id}/book")
async def confirm_booking(
    show_id: str,
    schedule: str = Form(""),
    seats: str = Form(""),
    code: str = Form(""),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    """Create the booking and go to My Bookings"""
    back = _book_url(show_id, schedule, seating.normalize_seats(seats), code)
    if not user:
        return redirect_with_notice("/login", *LOGIN_REQUIRED, variant="destructive")
    if not schedule:
        return redirect_with_notice(back, "No Schedule Selected", "Please select a date and time.", "destructive")

    try:
        booking = BookingService(db).create_booking(user, show_id, parse_iso(schedule), seats, code or None)
    except ValueError as e:
        title, detail = split_message(str(e), "Booking Failed")
        return redirect_with_notice(back, title, detail, "destructive")

    if not booking:
        return redirect_with_notice("/shows", "Show Not Found", variant="destructive")
    return RedirectResponse("/bookings?success=true", status_code=303)


@router.get("/bookings", response_class=HTMLResponse)
async def my_bookings_page(
    request: Request,
    success: bool = False,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    if not user:
        return redirect_with_notice("/login", *LOGIN_REQUIRED, variant="destructive")
    upcoming, past = BookingService(db).list_user_bookings(user.id)
    context = {"upcoming": upcoming, "past": past, "user": user}
    if success:
        context["notice"] = {
            "title": "Booking Successful!",
            "detail": "Your booking details are listed below. An e-ticket has been sent to your email.",
            "variant": "default",
        }
    return render_template("bookings.html", context, request)


@router.get("/wishlist", response_class=HTMLResponse)
async def wishlist_page(
    request: Request,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    if not user:
        return redirect_with_notice("/login", *LOGIN_REQUIRED, variant="destructive")
    return render_template("wishlist.html", {"shows": WishlistService(db).list_wishlist(user.id)}, request)


@router.post("/wishlist/{show_id}/remove")
async def remove_from_wishlist(
    show_id: str,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    if not user:
        return redirect_with_notice("/login", *LOGIN_REQUIRED, variant="destructive")
    if not WishlistService(db).remove(user.id, show_id):
        return redirect_with_notice("/wishlist", "Error", "Could not remove show from wishlist.", "destructive")
    return redirect_with_notice("/wishlist", "Removed", "Show removed from your wishlist.")


@router.get("/profile", response_class=HTMLResponse)
async def profile_page(
    request: Request,
    user: Optional[User] = Depends(get_current_user),
):
    if not user:
        return redirect_with_notice("/login", *LOGIN_REQUIRED, variant="destructive")
    return render_template("profile.html", {"user": user}, request)


@router.post("/profile")
async def update_profile_form(
    name: str = Form(""),
    email: str = Form(""),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    if not user:
        return redirect_with_notice("/login", *LOGIN_REQUIRED, variant="destructive")
    try:
        UserService(db).update_profile(user, name, email)
    except ValueError as e:
        return redirect_with_notice("/profile", "Update Failed", str(e), "destructive")
    return redirect_with_notice("/profile", "Profile Updated", "Your information has been saved.")


@router.post("/profile/password")
async def change_password_form(
    current_password: str = Form(""),
    new_password: str = Form(""),
    confirm_new_password: str = Form(""),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_current_user),
):
    if not user:
        return redirect_with_notice("/login", *LOGIN_REQUIRED, variant="destructive")
    try:
        result = AccountService(db).change_password(user, current_password, new_password, confirm_new_password)
    except ValueError as e:
        return redirect_with_notice("/profile", "Password Change Failed", str(e), "destructive")
    return redirect_with_notice(result.redirect_to, result.title, result.detail)
