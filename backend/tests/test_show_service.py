"""
Tests for ShowService and its parsing helpers
"""
from datetime import datetime, timedelta, timezone

import pytest

from curtaincall.models.show import Show, ShowStatus
from curtaincall.models.wishlist import WishlistItem
from curtaincall.services.show_service import (
    ShowService,
    parse_cast,
    parse_schedule,
    share_links
)


def _show(show_id, title, status, genre="Drama", rating=4.0, cast=None):
    return Show(
        id=show_id, title=title, cast=cast or [], genre=genre, rating=rating,
        description=f"About {title}", status=status, schedule=[], venue="Main Hall",
    )


@pytest.fixture
def catalogue(db):
    db.add_all([
        _show("show_001", "Othello", ShowStatus.ACTIVE.value, rating=4.8, cast=["Ian Stone"]),
        _show("show_002", "Cats", ShowStatus.UPCOMING.value, genre="Musical", rating=4.2),
        _show("show_003", "Macbeth", ShowStatus.CLOSED.value, rating=4.9),
        _show("show_004", "Noises Off", ShowStatus.ACTIVE.value, genre="Comedy", rating=3.1),
        _show("show_005", "Hair", ShowStatus.ENDED.value, genre="Musical"),
    ])
    db.commit()


class TestParsing:
    def test_parse_cast(self):
        assert parse_cast(" Alice Ray, Bob Smith ,,Alice Ray") == ["Alice Ray", "Bob Smith"]
        assert parse_cast(["X", " Y "]) == ["X", "Y"]
        assert parse_cast(None) == []

    def test_parse_schedule_keeps_valid_utc_entries(self):
        result = parse_schedule("2026-12-02T19:30:00Z, bogus, 2026-12-01T20:00:00Z, 2026-12-03 19:00")
        assert result == ["2026-12-01T20:00:00Z", "2026-12-02T19:30:00Z"]

    def test_parse_schedule_blank_is_empty(self):
        assert parse_schedule("") == []
        assert parse_schedule(" , ") == []

    def test_parse_schedule_rejects_all_invalid(self):
        with pytest.raises(ValueError, match="Invalid Schedule"):
            parse_schedule("tomorrow evening")

    def test_share_links_are_encoded(self):
        links = share_links("Cats & Dogs", "http://testserver/shows/show_1")
        assert links["link"] == "http://testserver/shows/show_1"
        assert "url=http%3A%2F%2Ftestserver%2Fshows%2Fshow_1" in links["twitter"]
        assert "Cats%20%26%20Dogs" in links["twitter"]
        assert links["facebook"].startswith("https://www.facebook.com/sharer/sharer.php?u=")


class TestPublicCatalogue:
    def test_only_active_and_upcoming(self, db, catalogue):
        ids = [s.id for s in ShowService(db).list_public()]
        assert ids == ["show_001", "show_002", "show_004"]

    def test_filters(self, db, catalogue):
        service = ShowService(db)
        assert [s.id for s in service.list_public(status="upcoming")] == ["show_002"]
        assert [s.id for s in service.list_public(genre="comedy")] == ["show_004"]
        assert [s.id for s in service.list_public(query="ian")] == ["show_001"]
        assert [s.id for s in service.list_public(status="all", genre="all", query="")] == [
            "show_001", "show_002", "show_004",
        ]

    def test_genres_featured_upcoming(self, db, catalogue):
        service = ShowService(db)
        assert service.genres() == ["Comedy", "Drama", "Musical"]
        assert [s.id for s in service.featured()] == ["show_001", "show_002"]
        assert [s.id for s in service.upcoming()] == ["show_002"]


class TestAdminCatalogue:
    def test_list_admin_sorted_and_filtered(self, db, catalogue):
        service = ShowService(db)
        assert [s.title for s in service.list_admin()] == ["Cats", "Hair", "Macbeth", "Noises Off", "Othello"]
        assert [s.id for s in service.list_admin(status="closed")] == ["show_003"]
        assert [s.id for s in service.list_admin(search="musical")] == ["show_002", "show_005"]

    def test_create_show(self, db):
        show = ShowService(db).create_show({
            "title": " Hamlet ",
            "description": "A prince hesitates.",
            "genre": "Drama",
            "venue": "Main Hall",
            "status": "Active",
            "cast": "Alice Ray, Bob Smith",
            "schedule": "2026-12-01T19:30:00Z",
        })
        assert show.id.startswith("show_")
        assert show.title == "Hamlet"
        assert show.status == "active"
        assert show.rating == 0.0
        assert show.cast == ["Alice Ray", "Bob Smith"]
        assert show.schedule == ["2026-12-01T19:30:00Z"]

    def test_create_requires_fields(self, db):
        with pytest.raises(ValueError, match="Missing Fields"):
            ShowService(db).create_show({"title": "Hamlet", "description": "", "genre": "Drama",
                                         "venue": "Main Hall", "status": "active"})
        with pytest.raises(ValueError, match="Missing Fields"):
            ShowService(db).create_show({"title": "Hamlet"})

    def test_create_rejects_unknown_status(self, db):
        with pytest.raises(ValueError, match="Invalid status"):
            ShowService(db).create_show({"title": "Hamlet", "description": "x", "genre": "Drama",
                                         "venue": "Main Hall", "status": "sold-out"})

    def test_update_is_partial(self, db, catalogue):
        service = ShowService(db)
        show = service.update_show("show_004", {"status": "closed", "schedule": "2026-12-01T19:30:00Z"})
        assert show.status == "closed"
        assert show.title == "Noises Off"
        assert show.schedule == ["2026-12-01T19:30:00Z"]
        assert service.update_show("show_missing", {"title": "x"}) is None

    def test_update_rejects_blank_title(self, db, catalogue):
        with pytest.raises(ValueError):
            ShowService(db).update_show("show_001", {"title": "   "})

    def test_delete_removes_wishlist_entries(self, db, catalogue):
        db.add(WishlistItem(user_id="user1", show_id="show_001"))
        db.commit()
        service = ShowService(db)
        assert service.delete_show("show_001") is True
        assert db.query(WishlistItem).count() == 0
        assert service.delete_show("show_001") is False


class TestScheduleHelpers:
    def test_upcoming_and_default_schedule(self):
        now = datetime(2026, 11, 1, 12, 0, tzinfo=timezone.utc)
        show = _show("show_x", "X", ShowStatus.ACTIVE.value)
        show.schedule = ["2026-10-30T19:00:00Z", "2026-11-03T19:00:00Z"]

        assert ShowService.upcoming_schedule(show, now) == [datetime(2026, 11, 3, 19, 0, tzinfo=timezone.utc)]
        assert ShowService.default_schedule(show, now) == datetime(2026, 11, 3, 19, 0, tzinfo=timezone.utc)
        later = now + timedelta(days=10)
        assert ShowService.default_schedule(show, later) == datetime(2026, 10, 30, 19, 0, tzinfo=timezone.utc)
