"""
Tests for the demo data seeder
"""
from collections import defaultdict

from curtaincall.models.booking import Booking, BookingStatus
from curtaincall.models.discount import Discount
from curtaincall.models.payment import Payment
from curtaincall.models.show import Show, ShowStatus
from curtaincall.models.user import User
from curtaincall.models.wishlist import WishlistItem
from curtaincall.services.seating import all_seat_ids, house_booked_seats
from curtaincall.services.seed import DemoDataSeeder


class TestDemoDataSeeder:
    def test_counts(self, db):
        seeder = DemoDataSeeder(db, random_seed=7)
        assert seeder.is_empty()

        counts = seeder.seed_all()
        assert counts == {
            "users": 16,
            "shows": 25,
            "bookings": 30,
            "payments": 40,
            "discounts": 25,
            "reviews": 30,
            "wishlist_items": 3,
        }
        assert not seeder.is_empty()
        assert db.query(User).count() == 16
        assert db.query(Payment).count() == 40

    def test_show_catalogue(self, seeded_db):
        shows = seeded_db.query(Show).order_by(Show.id).all()
        assert shows[0].id == "show_001"
        assert shows[0].title == "Comedy Show #1"
        for show in shows:
            assert 3.0 <= show.rating <= 5.0
            assert show.schedule == sorted(show.schedule)
            assert len(show.cast) == len(set(show.cast))

    def test_seats_never_overlap(self, seeded_db):
        valid = set(all_seat_ids())
        per_performance = defaultdict(list)
        for booking in seeded_db.query(Booking).all():
            assert booking.seats
            assert set(booking.seats) <= valid
            assert not set(booking.seats) & house_booked_seats(booking.schedule)
            per_performance[(booking.show_id, booking.schedule)].extend(booking.seats)

        for seats in per_performance.values():
            assert len(seats) == len(set(seats))

    def test_demo_user_has_bookable_bookings(self, seeded_db):
        bookings = seeded_db.query(Booking).filter(Booking.user_id == "user1").all()
        assert len(bookings) >= 3
        for booking in bookings:
            show = seeded_db.get(Show, booking.show_id)
            assert show.status == ShowStatus.ACTIVE.value
            assert booking.schedule in show.performances

    def test_cancelled_bookings_are_refunded(self, seeded_db):
        cancelled = seeded_db.query(Booking).filter(Booking.status == BookingStatus.CANCELLED.value).all()
        assert cancelled
        assert {b.payment_status for b in cancelled} == {"refunded"}

    def test_fixed_discounts_and_wishlist(self, seeded_db):
        codes = {d.code for d in seeded_db.query(Discount).all()}
        assert {"SUMMER20", "WELCOME10", "EXPIRED5", "LAUNCH15", "SAMPLE"} <= codes
        for item in seeded_db.query(WishlistItem).all():
            assert item.user_id == "user1"
            assert seeded_db.get(Show, item.show_id).status in ("active", "upcoming")

    def test_bookings_use_real_performances(self, db):
        DemoDataSeeder(db, random_seed=1).seed_all()
        for booking in db.query(Booking).all():
            show = db.get(Show, booking.show_id)
            assert booking.schedule in show.performances

    def test_demo_user_owns_every_tenth_booking(self, db):
        DemoDataSeeder(db, random_seed=1).seed_all()
        demo_ids = sorted(
            b.id for b in db.query(Booking).filter(Booking.user_id == "user1").all()
        )
        assert demo_ids == ["bk_010", "bk_020", "bk_030"]
