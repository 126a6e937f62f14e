"""
Analytics Service for the admin dashboard and reports
"""
from collections import Counter, OrderedDict
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.booking import Booking, BookingStatus
from curtaincall.models.payment import Payment
from curtaincall.models.show import Show, ShowStatus
from curtaincall.models.user import User
from curtaincall.utils.datetime_utils import end_of_day, start_of_day, utc_now

logger = LoggingConfig.get_logger(__name__)

DEFAULT_REPORT_DAYS = 30


def _month_keys(now: datetime, months: int) -> List[str]:
    """``YYYY-MM`` keys for the last ``months`` months, oldest first"""
    keys = []
    year, month = now.year, now.month
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def _month_label(key: str) -> str:
    return datetime.strptime(key, "%Y-%m").strftime("%b")


class AnalyticsService:
    """Aggregates bookings and payments for the back-office"""

    def __init__(self, db: Session):
        self.db = db

    def _show_performance(self, bookings: List[Booking], limit: int) -> List[Dict[str, Any]]:
        stats: Dict[str, Dict[str, Any]] = {}
        for b in bookings:
            if b.status == BookingStatus.CANCELLED.value:
                continue
            row = stats.setdefault(b.show_id, {
                "show_id": b.show_id,
                "title": b.show_title,
                "revenue": 0.0,
                "tickets_sold": 0,
                "bookings": 0,
            })
            row["revenue"] = round(row["revenue"] + b.total_price, 2)
            row["tickets_sold"] += len(b.seats or [])
            row["bookings"] += 1
        ranked = sorted(stats.values(), key=lambda r: (-r["revenue"], r["title"]))
        return ranked[:limit]

    def dashboard(self, now: Optional[datetime] = None, months: int = 6) -> Dict[str, Any]:
        """Headline numbers and monthly trends"""
        now = now or utc_now()
        bookings = self.db.query(Booking).all()
        payments = self.db.query(Payment).all()

        keys = _month_keys(now, months)
        revenue_by_month = OrderedDict((k, 0.0) for k in keys)
        bookings_by_month = OrderedDict((k, 0) for k in keys)
        for p in payments:
            key = p.created_at.strftime("%Y-%m")
            if key in revenue_by_month:
                revenue_by_month[key] = round(revenue_by_month[key] + p.net_amount, 2)
        for b in bookings:
            key = b.booking_date.strftime("%Y-%m")
            if key in bookings_by_month:
                bookings_by_month[key] += 1

        confirmed = sum(1 for b in bookings if b.status == BookingStatus.CONFIRMED.value)
        statuses = Counter(s for (s,) in self.db.query(Show.status).all())

        return {
            "total_revenue": round(sum(p.net_amount for p in payments), 2),
            "total_bookings": len(bookings),
            "active_shows": statuses.get(ShowStatus.ACTIVE.value, 0),
            "upcoming_shows": statuses.get(ShowStatus.UPCOMING.value, 0),
            "total_users": self.db.query(User).count(),
            "confirmation_rate": round(confirmed * 100 / len(bookings), 1) if bookings else 0.0,
            "revenue_by_month": [
                {"month": _month_label(k), "key": k, "revenue": v} for k, v in revenue_by_month.items()
            ],
            "bookings_by_month": [
                {"month": _month_label(k), "key": k, "bookings": v} for k, v in bookings_by_month.items()
            ],
            "show_performance": self._show_performance(bookings, limit=5),
        }

    def report(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Detailed report for a date range

        Args:
            date_from: First day (defaults to 30 days before date_to)
            date_to: Last day, included in full (defaults to today)

        Raises:
            ValueError: If the range ends before it starts
        """
        now = now or utc_now()
        end = end_of_day(date_to or now)
        start = start_of_day(date_from or (end - timedelta(days=DEFAULT_REPORT_DAYS - 1)))
        if start > end:
            raise ValueError("Invalid date range: 'from' must not be after 'to'")

        payments = (
            self.db.query(Payment)
            .filter(Payment.created_at >= start, Payment.created_at <= end)
            .all()
        )
        bookings = (
            self.db.query(Booking)
            .filter(Booking.booking_date >= start, Booking.booking_date <= end)
            .all()
        )

        revenue_by_day: Dict[str, float] = {}
        for p in payments:
            day = p.created_at.strftime("%Y-%m-%d")
            revenue_by_day[day] = round(revenue_by_day.get(day, 0.0) + p.net_amount, 2)

        total_revenue = round(sum(p.net_amount for p in payments), 2)
        live = [b for b in bookings if b.status != BookingStatus.CANCELLED.value]
        tickets = sum(len(b.seats or []) for b in live)
        weekdays = Counter(b.schedule.strftime("%A") for b in live)

        return {
            "date_from": start.date().isoformat(),
            "date_to": end.date().isoformat(),
            "total_revenue": total_revenue,
            "tickets_sold": tickets,
            "average_ticket_price": round(sum(b.total_price for b in live) / tickets, 2) if tickets else 0.0,
            "busiest_day": weekdays.most_common(1)[0][0] if weekdays else None,
            "revenue_by_day": [
                {"date": day, "revenue": revenue_by_day[day]} for day in sorted(revenue_by_day)
            ],
            "top_shows": self._show_performance(bookings, limit=5),
            "bookings_by_status": dict(Counter(b.status for b in bookings)),
            "bookings_by_venue": dict(Counter(b.venue for b in bookings)),
        }
