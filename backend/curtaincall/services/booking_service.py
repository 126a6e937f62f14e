"""
Booking Service for seat reservations
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from curtaincall.core.config import get_settings
from curtaincall.core.exceptions import (
    BookingConflictError,
    BookingUnavailableError,
    InvalidDiscountError
)
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.core.metrics import (
    booking_rejections_total,
    bookings_created_total,
    discounts_redeemed_total,
    seats_booked_total
)
from curtaincall.models.booking import Booking, BookingStatus, PaymentState
from curtaincall.models.discount import Discount
from curtaincall.models.user import User
from curtaincall.services.discount_service import DiscountService
from curtaincall.services.payment_service import (
    REFUNDABLE_STATUSES,
    PaymentService
)
from curtaincall.services.seating import (
    house_booked_seats,
    is_valid_seat,
    normalize_seats,
    sort_seats
)
from curtaincall.services.settings_service import SettingsService
from curtaincall.services.show_service import ShowService
from curtaincall.utils.datetime_utils import ensure_utc, utc_now
from curtaincall.utils.ids import new_id

logger = LoggingConfig.get_logger(__name__)


def quote(seat_count: int, discount: Optional[Discount] = None, ticket_price: Optional[float] = None) -> Dict:
    """
    Price a selection of seats

    Returns:
        Dict with seat_count, ticket_price, subtotal, discount_percentage,
        discount_amount and total, amounts rounded to cents
    """
    price = ticket_price if ticket_price is not None else get_settings().ticket_price
    subtotal = seat_count * price
    pct = discount.discount_percentage if discount else 0
    discount_amount = subtotal * pct / 100
    return {
        "seat_count": seat_count,
        "ticket_price": round(price, 2),
        "subtotal": round(subtotal, 2),
        "discount_code": discount.code if discount else None,
        "discount_percentage": pct,
        "discount_amount": round(discount_amount, 2),
        "total": round(subtotal - discount_amount, 2),
    }


class BookingService:
    """Service for creating and managing bookings"""

    def __init__(self, db: Session):
        self.db = db
        self.shows = ShowService(db)
        self.discounts = DiscountService(db)
        self.payments = PaymentService(db)

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self.db.get(Booking, booking_id)

    def booked_seats(self, show_id: str, schedule: datetime) -> Set[str]:
        """House holds plus seats of every live booking for the same performance"""
        schedule = ensure_utc(schedule)
        taken = set(house_booked_seats(schedule))
        bookings = (
            self.db.query(Booking)
            .filter(
                Booking.show_id == show_id,
                Booking.schedule == schedule,
                Booking.status != BookingStatus.CANCELLED.value,
            )
            .all()
        )
        for booking in bookings:
            taken.update(booking.seats or [])
        return taken

    def quote(self, seat_count: int, discount_code: Optional[str] = None) -> Dict:
        """
        Price a selection, applying a discount code when given

        Raises:
            InvalidDiscountError: If a code is given but cannot be redeemed
        """
        discount = None
        if discount_code and discount_code.strip():
            discount = self.discounts.lookup_code(discount_code)
            if discount is None:
                raise InvalidDiscountError("Invalid Code: the discount code entered is not valid.")
        return quote(seat_count, discount)

    def _reject(self, reason: str, error: ValueError) -> None:
        booking_rejections_total.labels(reason=reason).inc()
        logger.info(f"Booking rejected ({reason}): {error}")
        raise error

    def create_booking(
        self,
        user: User,
        show_id: str,
        schedule: datetime,
        seats: Iterable[str],
        discount_code: Optional[str] = None,
    ) -> Optional[Booking]:
        """
        Book seats for one performance and record the payment

        Args:
            user: Who is booking
            show_id: Show to book
            schedule: Performance start (must be one of the show's, in the future)
            seats: Seat ids, list or comma-separated string
            discount_code: Optional promo code

        Returns:
            Confirmed, paid booking, or None if the show does not exist

        Raises:
            BookingUnavailableError: Show not active or performance not bookable
            BookingConflictError: A requested seat is already taken
            InvalidDiscountError: Discount code cannot be redeemed
            ValueError: Bad seat selection
        """
        show = self.shows.get_show(show_id)
        if not show:
            return None

        now = utc_now()
        if not show.is_bookable:
            self._reject("show_not_active", BookingUnavailableError(
                "Booking Not Available: this show is not currently available for booking."
            ))

        schedule = ensure_utc(schedule)
        if schedule not in show.performances:
            self._reject("unknown_schedule", BookingUnavailableError(
                "Booking Not Available: the selected performance is not part of this show's schedule."
            ))
        if schedule <= now:
            self._reject("past_schedule", BookingUnavailableError(
                "Booking Not Available: the selected performance has already started."
            ))

        requested = normalize_seats(seats)
        if not requested:
            self._reject("no_seats", ValueError("No Seats Selected: please select at least one seat."))
        if len(set(requested)) != len(requested):
            self._reject("duplicate_seats", ValueError("Each seat can only be selected once."))
        invalid = [s for s in requested if not is_valid_seat(s)]
        if invalid:
            self._reject("invalid_seats", ValueError(f"Unknown seats: {', '.join(invalid)}"))

        max_seats = SettingsService(self.db).max_seats_per_booking()
        if len(requested) > max_seats:
            self._reject("too_many_seats", ValueError(
                f"Seat Limit Reached: you can select a maximum of {max_seats} seats."
            ))

        taken = self.booked_seats(show.id, schedule) & set(requested)
        if taken:
            self._reject("seat_conflict", BookingConflictError(
                f"Seats already booked: {', '.join(sort_seats(taken))}"
            ))

        discount = None
        if discount_code and discount_code.strip():
            discount = self.discounts.lookup_code(discount_code, now)
            if discount is None:
                self._reject("invalid_discount", InvalidDiscountError(
                    "Invalid Code: the discount code entered is not valid."
                ))

        price = quote(len(requested), discount)
        try:
            booking = Booking(
                id=new_id("bk"),
                show_id=show.id,
                show_title=show.title,
                user_id=user.id,
                user_name=user.name,
                venue=show.venue,
                schedule=schedule,
                seats=sort_seats(requested),
                total_price=price["total"],
                booking_date=now,
                status=BookingStatus.CONFIRMED.value,
                payment_status=PaymentState.PAID.value,
                discount_code=discount.code if discount else None,
            )
            self.db.add(booking)
            self.payments.record_payment(booking)
            if discount:
                self.discounts.redeem(discount)
            user.booking_count = (user.booking_count or 0) + 1
            self.db.commit()
            self.db.refresh(booking)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating booking for show {show_id}: {e}", exc_info=True)
            raise

        bookings_created_total.labels(venue=show.venue).inc()
        seats_booked_total.inc(len(requested))
        if discount:
            discounts_redeemed_total.labels(code=discount.code).inc()
        logger.info(
            f"Created booking {booking.id} for {show.title}: {', '.join(booking.seats)}",
            extra={"user_id": user.id, "total": booking.total_price},
        )
        return booking

    def list_user_bookings(self, user_id: str, now: Optional[datetime] = None) -> Tuple[List[Booking], List[Booking]]:
        """
        A user's bookings split into (upcoming, past)

        Upcoming means confirmed with a performance still ahead; everything
        else is past. Both lists are sorted by performance, latest first.
        """
        now = now or utc_now()
        bookings = (
            self.db.query(Booking)
            .filter(Booking.user_id == user_id)
            .order_by(Booking.schedule.desc())
            .all()
        )
        upcoming = [
            b for b in bookings
            if b.schedule >= now and b.status == BookingStatus.CONFIRMED.value
        ]
        past = [b for b in bookings if b not in upcoming]
        return upcoming, past

    def list_admin(
        self,
        search: Optional[str] = None,
        show_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        query = self.db.query(Booking)
        if status and status.lower() != "all":
            query = query.filter(Booking.status == status.lower())
        if show_id and show_id != "all":
            query = query.filter(Booking.show_id == show_id)
        bookings = query.order_by(Booking.booking_date.desc()).all()

        if search:
            q = search.lower()
            bookings = [
                b for b in bookings
                if q in b.show_title.lower()
                or q in b.user_name.lower()
                or q in b.id.lower()
                or q in ", ".join(b.seats or []).lower()
                or q in b.venue.lower()
            ]
        return bookings

    def show_titles(self) -> List[Tuple[str, str]]:
        """(show_id, show_title) pairs that appear in bookings, by title"""
        rows = self.db.query(Booking.show_id, Booking.show_title).distinct().all()
        return sorted({(r[0], r[1]) for r in rows}, key=lambda pair: pair[1].lower())

    def cancel_booking(self, booking_id: str) -> Optional[Booking]:
        """
        Cancel a booking and refund it if it was paid

        Raises:
            BookingConflictError: If the booking is already cancelled
        """
        booking = self.get_booking(booking_id)
        if not booking:
            return None
        if booking.status == BookingStatus.CANCELLED.value:
            raise BookingConflictError(f"Booking {booking_id} is already cancelled")

        booking.status = BookingStatus.CANCELLED.value
        if booking.payment_status == PaymentState.PAID.value:
            self._refund_payment(booking)

        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Cancelled booking {booking_id}")
        return booking

    def refund_booking(self, booking_id: str) -> Optional[Booking]:
        """
        Refund a paid booking without cancelling it

        Raises:
            ValueError: If the booking is not paid
        """
        booking = self.get_booking(booking_id)
        if not booking:
            return None
        if booking.payment_status != PaymentState.PAID.value:
            raise ValueError(f"Booking {booking_id} is not paid (payment status: {booking.payment_status})")

        self._refund_payment(booking)
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Refunded booking {booking_id}")
        return booking

    def _refund_payment(self, booking: Booking) -> None:
        booking.payment_status = PaymentState.REFUNDED.value
        payment = self.payments.payment_for_booking(booking.id)
        if payment and payment.status in REFUNDABLE_STATUSES and payment.refundable_amount > 0:
            self.payments.apply_refund(payment)
