"""
Show Service for browsing and managing theatre productions
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from sqlalchemy.orm import Session

from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.show import Show, ShowStatus
from curtaincall.models.wishlist import WishlistItem
from curtaincall.utils.datetime_utils import parse_iso, to_iso_z, utc_now
from curtaincall.utils.ids import new_id

logger = LoggingConfig.get_logger(__name__)

PUBLIC_STATUSES = (ShowStatus.ACTIVE.value, ShowStatus.UPCOMING.value)
REQUIRED_FIELDS = ("title", "description", "genre", "venue", "status")


def parse_cast(raw: Any) -> List[str]:
    """Split a comma-separated cast string, dropping blanks and duplicates"""
    if raw is None:
        return []
    names = raw.split(",") if isinstance(raw, str) else list(raw)
    cast: List[str] = []
    for name in names:
        name = str(name).strip()
        if name and name not in cast:
            cast.append(name)
    return cast


def parse_schedule(raw: Any) -> List[str]:
    """
    Parse a comma-separated list of ``YYYY-MM-DDTHH:MM:SSZ`` strings

    Entries that are not UTC ISO datetimes are dropped. If the input is
    non-blank but nothing survives, the schedule is rejected.

    Raises:
        ValueError: If no valid entry is found in a non-blank schedule
    """
    if raw is None:
        return []
    entries = raw.split(",") if isinstance(raw, str) else [str(e) for e in raw]
    valid = []
    for entry in entries:
        entry = entry.strip()
        if "T" not in entry or not entry.endswith("Z"):
            continue
        try:
            valid.append(parse_iso(entry))
        except ValueError:
            continue

    blank = all(not e.strip() for e in entries)
    if not valid and not blank:
        raise ValueError(
            "Invalid Schedule: enter valid ISO date strings (YYYY-MM-DDTHH:mm:ssZ), comma-separated."
        )
    return [to_iso_z(d) for d in sorted(set(valid))]


def share_links(title: str, url: str) -> Dict[str, str]:
    """Social share URLs for a show page"""
    encoded_url = quote(url, safe="")
    encoded_text = quote(f"Check out this show: {title}", safe="")
    return {
        "link": url,
        "twitter": f"https://twitter.com/intent/tweet?url={encoded_url}&text={encoded_text}",
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={encoded_url}",
    }


class ShowService:
    """Service for reading and maintaining the show catalogue"""

    def __init__(self, db: Session):
        self.db = db

    def get_show(self, show_id: str) -> Optional[Show]:
        return self.db.get(Show, show_id)

    def list_active_and_upcoming(self) -> List[Show]:
        return (
            self.db.query(Show)
            .filter(Show.status.in_(PUBLIC_STATUSES))
            .order_by(Show.id)
            .all()
        )

    def list_public(
        self,
        status: Optional[str] = None,
        genre: Optional[str] = None,
        query: Optional[str] = None,
    ) -> List[Show]:
        """
        Shows visible on the public listing

        Args:
            status: 'active', 'upcoming' or 'all'
            genre: Genre name or 'all'
            query: Free text matched against title, genre, cast and description
        """
        shows = self.list_active_and_upcoming()

        if status and status.lower() != "all":
            shows = [s for s in shows if s.status.lower() == status.lower()]

        if genre and genre.lower() != "all":
            shows = [s for s in shows if s.genre.lower() == genre.lower()]

        if query:
            q = query.lower()
            shows = [
                s for s in shows
                if q in s.title.lower()
                or q in s.genre.lower()
                or any(q in actor.lower() for actor in (s.cast or []))
                or q in (s.description or "").lower()
            ]

        return shows

    def genres(self) -> List[str]:
        return sorted({s.genre for s in self.list_active_and_upcoming()})

    def featured(self, limit: int = 3) -> List[Show]:
        return [s for s in self.list_active_and_upcoming() if s.rating >= 4.0][:limit]

    def upcoming(self, limit: int = 3) -> List[Show]:
        return [
            s for s in self.list_active_and_upcoming()
            if s.status == ShowStatus.UPCOMING.value
        ][:limit]

    def list_admin(self, search: Optional[str] = None, status: Optional[str] = None) -> List[Show]:
        """All shows for the back-office, sorted by title"""
        shows = self.db.query(Show).all()

        if status and status.lower() != "all":
            shows = [s for s in shows if s.status.lower() == status.lower()]

        if search:
            q = search.lower()
            shows = [
                s for s in shows
                if q in s.title.lower()
                or q in s.venue.lower()
                or q in s.genre.lower()
                or any(q in actor.lower() for actor in (s.cast or []))
            ]

        return sorted(shows, key=lambda s: s.title.lower())

    def _clean(self, data: Dict[str, Any], partial: bool) -> Dict[str, Any]:
        fields: Dict[str, Any] = {}
        for key in REQUIRED_FIELDS:
            if key not in data:
                continue
            value = str(data.get(key) or "").strip()
            if not value:
                raise ValueError("Missing Fields: please fill in all required fields.")
            fields[key] = value

        if not partial:
            missing = [key for key in REQUIRED_FIELDS if key not in fields]
            if missing:
                raise ValueError("Missing Fields: please fill in all required fields.")

        if "status" in fields:
            status = str(fields["status"]).lower()
            if status not in {s.value for s in ShowStatus}:
                raise ValueError(f"Invalid status '{fields['status']}'")
            fields["status"] = status

        if "cast" in data:
            fields["cast"] = parse_cast(data["cast"])
        if "schedule" in data:
            fields["schedule"] = parse_schedule(data["schedule"])

        return fields

    def create_show(self, data: Dict[str, Any]) -> Show:
        """
        Create a show

        Args:
            data: title, description, genre, venue, status, cast (CSV or list),
                schedule (CSV of ISO strings or list)

        Raises:
            ValueError: On missing fields, bad status or an invalid schedule
        """
        fields = self._clean(data, partial=False)
        show = Show(
            id=new_id("show"),
            rating=0.0,
            cast=fields.pop("cast", []),
            schedule=fields.pop("schedule", []),
            **fields,
        )
        self.db.add(show)
        self.db.commit()
        self.db.refresh(show)
        logger.info(f"Created show {show.id}: {show.title}")
        return show

    def update_show(self, show_id: str, data: Dict[str, Any]) -> Optional[Show]:
        """Apply a partial update; returns None when the show does not exist"""
        show = self.get_show(show_id)
        if not show:
            return None

        fields = self._clean(data, partial=True)
        for key, value in fields.items():
            setattr(show, key, value)

        self.db.commit()
        self.db.refresh(show)
        logger.info(f"Updated show {show_id}: {sorted(fields)}")
        return show

    def delete_show(self, show_id: str) -> bool:
        show = self.get_show(show_id)
        if not show:
            return False
        self.db.query(WishlistItem).filter(WishlistItem.show_id == show_id).delete()
        self.db.delete(show)
        self.db.commit()
        logger.info(f"Deleted show {show_id}")
        return True

    @staticmethod
    def upcoming_schedule(show: Show, now: Optional[datetime] = None) -> List[datetime]:
        now = now or utc_now()
        return [d for d in show.performances if d > now]

    @classmethod
    def default_schedule(cls, show: Show, now: Optional[datetime] = None) -> Optional[datetime]:
        """First future performance, falling back to the first scheduled one"""
        future = cls.upcoming_schedule(show, now)
        if future:
            return future[0]
        performances = show.performances
        return performances[0] if performances else None
