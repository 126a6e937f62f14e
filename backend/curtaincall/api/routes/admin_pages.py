"""
Page routes for the admin back-office
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.core.templates import (
    redirect_with_notice,
    render_template,
    split_message
)
from curtaincall.models.payment import PaymentStatus
from curtaincall.models.show import ShowStatus
from curtaincall.models.user import UserStatus
from curtaincall.services.analytics_service import AnalyticsService
from curtaincall.services.booking_service import BookingService
from curtaincall.services.discount_service import DiscountService
from curtaincall.services.payment_service import PaymentService
from curtaincall.services.review_service import ReviewService
from curtaincall.services.settings_service import GROUP_SCHEMAS, SettingsService
from curtaincall.services.show_service import ShowService
from curtaincall.services.user_service import UserService
from curtaincall.utils.datetime_utils import parse_optional_date

router = APIRouter(prefix="/admin", tags=["admin_pages"])
logger = LoggingConfig.get_logger(__name__)


def _error_redirect(url: str, error: ValueError, default_title: str = "Error"):
    title, detail = split_message(str(error), default_title)
    return redirect_with_notice(url, title, detail, "destructive")


def _optional_int(value: str) -> Optional[int]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid Data: '{value}' is not a whole number.")


# ---------------------------------------------------------------------------
# Dashboard and analytics
# ---------------------------------------------------------------------------

@router.get("", response_class=HTMLResponse)
async def dashboard_page(request: Request, db: Session = Depends(get_db)):
    """Admin dashboard"""
    return render_template("admin/dashboard.html", {"stats": AnalyticsService(db).dashboard()}, request)


@router.get("/analytics", response_class=HTMLResponse)
async def analytics_page(
    request: Request,
    date_from: str = "",
    date_to: str = "",
    db: Session = Depends(get_db),
):
    try:
        report = AnalyticsService(db).report(parse_optional_date(date_from), parse_optional_date(date_to))
    except ValueError as e:
        return _error_redirect("/admin/analytics", e, "Invalid Date Range")
    return render_template("admin/analytics.html", {"report": report}, request)


# ---------------------------------------------------------------------------
# Shows
# ---------------------------------------------------------------------------

@router.get("/shows", response_class=HTMLResponse)
async def shows_page(
    request: Request,
    search: str = "",
    status: str = "all",
    edit: Optional[str] = None,
    new: bool = False,
    db: Session = Depends(get_db),
):
    """Show list; ``?new=1`` or ``?edit=<id>`` opens the form"""
    service = ShowService(db)
    editing = service.get_show(edit) if edit else None
    return render_template(
        "admin/shows.html",
        {
            "shows": service.list_admin(search=search, status=status),
            "filters": {"search": search, "status": status},
            "statuses": [s.value for s in ShowStatus],
            "editing": editing,
            "show_form": new or editing is not None,
        },
        request,
    )


def _show_form_data(title, description, genre, venue, status, cast, schedule) -> dict:
    return {
        "title": title,
        "description": description,
        "genre": genre,
        "venue": venue,
        "status": status,
        "cast": cast,
        "schedule": schedule,
    }


@router.post("/shows")
async def create_show_form(
    title: str = Form(""),
    description: str = Form(""),
    genre: str = Form(""),
    venue: str = Form(""),
    status: str = Form("upcoming"),
    cast: str = Form(""),
    schedule: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        show = ShowService(db).create_show(
            _show_form_data(title, description, genre, venue, status, cast, schedule)
        )
    except ValueError as e:
        return _error_redirect("/admin/shows?new=1", e)
    return redirect_with_notice("/admin/shows", "Show Created", f"{show.title} has been added.")


@router.post("/shows/{show_id}")
async def update_show_form(
    show_id: str,
    title: str = Form(""),
    description: str = Form(""),
    genre: str = Form(""),
    venue: str = Form(""),
    status: str = Form("upcoming"),
    cast: str = Form(""),
    schedule: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        show = ShowService(db).update_show(
            show_id, _show_form_data(title, description, genre, venue, status, cast, schedule)
        )
    except ValueError as e:
        return _error_redirect(f"/admin/shows?edit={show_id}", e)
    if not show:
        return redirect_with_notice("/admin/shows", "Error", f"Show {show_id} not found.", "destructive")
    return redirect_with_notice("/admin/shows", "Show Updated", f"{show.title} has been saved.")


@router.post("/shows/{show_id}/delete")
async def delete_show_form(show_id: str, db: Session = Depends(get_db)):
    if not ShowService(db).delete_show(show_id):
        return redirect_with_notice("/admin/shows", "Error", f"Show {show_id} not found.", "destructive")
    return redirect_with_notice("/admin/shows", "Show Deleted", f"Show {show_id} has been removed.")


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------

@router.get("/bookings", response_class=HTMLResponse)
async def bookings_page(
    request: Request,
    search: str = "",
    show_id: str = "all",
    status: str = "all",
    db: Session = Depends(get_db),
):
    service = BookingService(db)
    return render_template(
        "admin/bookings.html",
        {
            "bookings": service.list_admin(search=search, show_id=show_id, status=status),
            "show_titles": service.show_titles(),
            "filters": {"search": search, "show_id": show_id, "status": status},
        },
        request,
    )


@router.post("/bookings/{booking_id}/cancel")
async def cancel_booking_form(booking_id: str, db: Session = Depends(get_db)):
    try:
        booking = BookingService(db).cancel_booking(booking_id)
    except ValueError as e:
        return _error_redirect("/admin/bookings", e, "Cancel Failed")
    if not booking:
        return redirect_with_notice("/admin/bookings", "Error", f"Booking {booking_id} not found.", "destructive")
    return redirect_with_notice("/admin/bookings", "Booking Cancelled", f"Booking {booking_id} has been cancelled.")


@router.post("/bookings/{booking_id}/refund")
async def refund_booking_form(booking_id: str, db: Session = Depends(get_db)):
    try:
        booking = BookingService(db).refund_booking(booking_id)
    except ValueError as e:
        return _error_redirect("/admin/bookings", e, "Refund Failed")
    if not booking:
        return redirect_with_notice("/admin/bookings", "Error", f"Booking {booking_id} not found.", "destructive")
    return redirect_with_notice("/admin/bookings", "Booking Refunded", f"Booking {booking_id} has been refunded.")


# ---------------------------------------------------------------------------
# Discounts
# ---------------------------------------------------------------------------

@router.get("/discounts", response_class=HTMLResponse)
async def discounts_page(
    request: Request,
    edit: Optional[str] = None,
    new: bool = False,
    db: Session = Depends(get_db),
):
    service = DiscountService(db)
    editing = service.get_discount(edit) if edit else None
    return render_template(
        "admin/discounts.html",
        {
            "discounts": service.list_discounts(),
            "editing": editing,
            "discount_form": new or editing is not None,
        },
        request,
    )


def _discount_form_data(code, discount_percentage, description, is_active, valid_from, valid_until, usage_limit) -> dict:
    return {
        "code": code,
        "discount_percentage": _optional_int(discount_percentage),
        "description": description,
        "is_active": is_active,
        "valid_from": parse_optional_date(valid_from),
        "valid_until": parse_optional_date(valid_until),
        "usage_limit": _optional_int(usage_limit),
    }


@router.post("/discounts")
async def create_discount_form(
    code: str = Form(""),
    discount_percentage: str = Form(""),
    description: str = Form(""),
    is_active: bool = Form(False),
    valid_from: str = Form(""),
    valid_until: str = Form(""),
    usage_limit: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        data = _discount_form_data(code, discount_percentage, description, is_active, valid_from, valid_until, usage_limit)
        discount = DiscountService(db).create_discount(**data)
    except ValueError as e:
        return _error_redirect("/admin/discounts?new=1", e, "Invalid Data")
    return redirect_with_notice("/admin/discounts", "Discount Created", f"Code {discount.code} is ready to use.")


@router.post("/discounts/{discount_id}")
async def update_discount_form(
    discount_id: str,
    code: str = Form(""),
    discount_percentage: str = Form(""),
    description: str = Form(""),
    is_active: bool = Form(False),
    valid_from: str = Form(""),
    valid_until: str = Form(""),
    usage_limit: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        data = _discount_form_data(code, discount_percentage, description, is_active, valid_from, valid_until, usage_limit)
        discount = DiscountService(db).update_discount(discount_id, **data)
    except ValueError as e:
        return _error_redirect(f"/admin/discounts?edit={discount_id}", e, "Invalid Data")
    if not discount:
        return redirect_with_notice("/admin/discounts", "Error", f"Discount {discount_id} not found.", "destructive")
    return redirect_with_notice("/admin/discounts", "Discount Updated", f"Code {discount.code} has been saved.")


@router.post("/discounts/{discount_id}/delete")
async def delete_discount_form(discount_id: str, db: Session = Depends(get_db)):
    if not DiscountService(db).delete_discount(discount_id):
        return redirect_with_notice("/admin/discounts", "Error", f"Discount {discount_id} not found.", "destructive")
    return redirect_with_notice("/admin/discounts", "Discount Deleted", f"Discount {discount_id} has been removed.")


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------

@router.get("/payments", response_class=HTMLResponse)
async def payments_page(
    request: Request,
    search: str = "",
    status: str = "all",
    date_from: str = "",
    date_to: str = "",
    db: Session = Depends(get_db),
):
    try:
        start = parse_optional_date(date_from)
        end = parse_optional_date(date_to)
    except ValueError as e:
        return _error_redirect("/admin/payments", e, "Invalid Date")
    return render_template(
        "admin/payments.html",
        {
            "payments": PaymentService(db).list_admin(search=search, status=status, date_from=start, date_to=end),
            "statuses": [s.value for s in PaymentStatus],
            "filters": {"search": search, "status": status, "date_from": date_from, "date_to": date_to},
        },
        request,
    )


@router.post("/payments/{payment_id}/refund")
async def refund_payment_form(
    payment_id: str,
    amount: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        refund_amount = float(amount) if amount.strip() else None
        payment = PaymentService(db).trigger_refund(payment_id, refund_amount)
    except ValueError as e:
        return _error_redirect("/admin/payments", e, "Refund Failed")
    if not payment:
        return redirect_with_notice("/admin/payments", "Error", f"Payment {payment_id} not found.", "destructive")
    kind = "Partial refund" if payment.status == PaymentStatus.PARTIALLY_REFUNDED.value else "Refund"
    return redirect_with_notice("/admin/payments", "Refund Issued", f"{kind} processed for {payment.id}.")


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

@router.get("/reviews", response_class=HTMLResponse)
async def reviews_page(
    request: Request,
    show_id: str = "all",
    rating: int = 0,
    db: Session = Depends(get_db),
):
    service = ReviewService(db)
    return render_template(
        "admin/reviews.html",
        {
            "reviews": service.list_admin(show_id=show_id, rating=rating),
            "shows": service.reviewed_shows(),
            "filters": {"show_id": show_id, "rating": rating},
        },
        request,
    )


@router.post("/reviews/{review_id}/delete")
async def delete_review_form(review_id: str, db: Session = Depends(get_db)):
    if not ReviewService(db).delete_review(review_id):
        return redirect_with_notice("/admin/reviews", "Error", f"Review {review_id} not found.", "destructive")
    return redirect_with_notice("/admin/reviews", "Review Deleted", f"Review {review_id} has been removed.")


@router.post("/reviews/{review_id}/block")
async def block_review_form(review_id: str, db: Session = Depends(get_db)):
    if not ReviewService(db).block_review(review_id):
        return redirect_with_notice("/admin/reviews", "Error", f"Review {review_id} not found.", "destructive")
    return redirect_with_notice("/admin/reviews", "Review Blocked", f"Review {review_id} is hidden from the public site.")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@router.get("/users", response_class=HTMLResponse)
async def users_page(request: Request, search: str = "", db: Session = Depends(get_db)):
    return render_template(
        "admin/users.html",
        {
            "users": UserService(db).list_users(search=search),
            "statuses": [s.value for s in UserStatus],
            "filters": {"search": search},
        },
        request,
    )


@router.post("/users/{user_id}/status")
async def update_user_status_form(user_id: str, status: str = Form(""), db: Session = Depends(get_db)):
    try:
        user = UserService(db).update_status(user_id, status)
    except ValueError as e:
        return _error_redirect("/admin/users", e)
    if not user:
        return redirect_with_notice("/admin/users", "Error", f"User {user_id} not found.", "destructive")
    return redirect_with_notice("/admin/users", "User Updated", f"{user.name} is now {user.status.replace('_', ' ')}.")


@router.post("/users/{user_id}/delete")
async def delete_user_form(user_id: str, db: Session = Depends(get_db)):
    if not UserService(db).delete_user(user_id):
        return redirect_with_notice("/admin/users", "Error", f"User {user_id} not found.", "destructive")
    return redirect_with_notice("/admin/users", "User Deleted", f"User {user_id} has been removed.")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@router.get("/settings", response_class=HTMLResponse)
async def settings_page(request: Request, tab: str = "general", db: Session = Depends(get_db)):
    """Settings page with one form per group"""
    return render_template(
        "admin/settings.html",
        {
            "groups": SettingsService(db).all_groups(),
            "tab": tab if tab in GROUP_SCHEMAS else "general",
        },
        request,
    )


@router.post("/settings/{group}")
async def save_settings_form(group: str, request: Request, db: Session = Depends(get_db)):
    """Save one group; unchecked checkboxes are absent from the form and mean False"""
    if group not in GROUP_SCHEMAS:
        return redirect_with_notice("/admin/settings", "Error", f"Unknown settings group '{group}'.", "destructive")

    form = await request.form()
    values = {key: value for key, value in form.items()}
    for name, field in GROUP_SCHEMAS[group].model_fields.items():
        if field.annotation is bool:
            values[name] = name in form

    try:
        SettingsService(db).save_group(group, values, updated_by="admin")
    except ValueError as e:
        return _error_redirect(f"/admin/settings?tab={group}", e, "Invalid Settings")
    return redirect_with_notice(f"/admin/settings?tab={group}", "Settings Saved", f"{group.title()} settings have been updated.")
