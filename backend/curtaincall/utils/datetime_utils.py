"""
Datetime utilities
All timestamps in CurtainCall are timezone-aware UTC.
"""
from datetime import datetime, time, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time (timezone-aware)"""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return to_iso_z(utc_now())


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO-8601 string (``Z`` suffix allowed) into an aware UTC datetime

    Raises:
        ValueError: If the string is not a valid ISO-8601 datetime
    """
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def to_iso_z(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SSZ``"""
    return ensure_utc(value).replace(microsecond=0).strftime("%Y-%m-%dT%H:%M:%SZ")


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(ensure_utc(value).date(), time.min, tzinfo=timezone.utc)


def end_of_day(value: datetime) -> datetime:
    return datetime.combine(ensure_utc(value).date(), time.max, tzinfo=timezone.utc)


def parse_optional_date(value: Optional[str]) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` or a full ISO string; blank means None"""
    if value is None or not value.strip():
        return None
    return parse_iso(value if "T" in value else value.strip() + "T00:00:00Z")
