"""
Tests for the JSON API
"""
from datetime import timedelta

import pytest

from curtaincall.models.booking import Booking, BookingStatus, PaymentState
from curtaincall.models.discount import Discount
from curtaincall.models.payment import Payment, PaymentStatus
from curtaincall.models.review import Review
from curtaincall.utils.datetime_utils import to_iso_z, utc_now


@pytest.fixture
def welcome_code(db):
    discount = Discount(
        id="disc_welcome", code="WELCOME10", discount_percentage=10,
        description="New User Welcome Offer", is_active=True, times_used=0, created_at=utc_now(),
    )
    db.add(discount)
    db.commit()
    return discount


@pytest.fixture
def paid_booking(db, active_show, future_schedule):
    booking = Booking(
        id="bk_paid", show_id=active_show.id, show_title=active_show.title,
        user_id="user2", user_name="Bob", venue=active_show.venue,
        schedule=future_schedule, seats=["H1", "H2"], total_price=100.0,
        booking_date=utc_now(), status=BookingStatus.CONFIRMED.value,
        payment_status=PaymentState.PAID.value,
    )
    payment = Payment(
        id="pi_paid", booking_id="bk_paid", user_id="user2", user_name="Bob",
        amount=100.0, currency="USD", status=PaymentStatus.SUCCEEDED.value,
        payment_method="Card", created_at=utc_now(), show_title=active_show.title,
    )
    db.add_all([booking, payment])
    db.commit()
    return booking


class TestRootAndOperations:
    def test_api_root(self, client):
        response = client.get("/api")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "CurtainCall"
        assert data["status"] == "running"

    def test_health(self, client, active_show):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"] == {"status": "healthy", "shows": 1}

    def test_metrics(self, client):
        client.get("/api")
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "curtaincall_http_requests_total" in response.text


class TestShowsApi:
    def test_list_only_public_shows(self, client, db, active_show, upcoming_show):
        response = client.get("/api/shows")
        assert response.status_code == 200
        assert {s["id"] for s in response.json()} == {"show_900", "show_901"}

    def test_list_filters(self, client, active_show, upcoming_show):
        assert [s["id"] for s in client.get("/api/shows?status=upcoming").json()] == ["show_901"]
        assert [s["id"] for s in client.get("/api/shows?genre=drama").json()] == ["show_900"]
        assert [s["id"] for s in client.get("/api/shows?q=diana").json()] == ["show_901"]

    def test_genres(self, client, active_show, upcoming_show):
        assert client.get("/api/shows/genres").json() == ["Comedy", "Drama"]

    def test_detail(self, client, user, active_show):
        response = client.get(f"/api/shows/{active_show.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Hamlet"
        assert data["is_bookable"] is True
        assert data["is_wishlisted"] is False
        assert data["average_rating"] == 4.5
        assert data["upcoming_schedule"] == active_show.schedule
        assert data["share"]["link"].endswith(f"/shows/{active_show.id}")

    def test_detail_not_found(self, client):
        assert client.get("/api/shows/show_missing").status_code == 404

    def test_reviews(self, client, user, active_show):
        response = client.post(
            f"/api/shows/{active_show.id}/reviews",
            json={"rating": 5, "comment": "Stunning from start to finish."},
        )
        assert response.status_code == 201
        assert response.json()["user_name"] == "Alice"

        reviews = client.get(f"/api/shows/{active_show.id}/reviews").json()
        assert [r["rating"] for r in reviews] == [5]

    def test_review_validation(self, client, user, active_show):
        response = client.post(f"/api/shows/{active_show.id}/reviews", json={"rating": 5, "comment": "short"})
        assert response.status_code == 400
        response = client.post("/api/shows/show_missing/reviews", json={"rating": 5, "comment": "Stunning evening."})
        assert response.status_code == 404

    def test_seat_map(self, client, active_show):
        response = client.get(f"/api/shows/{active_show.id}/seats")
        assert response.status_code == 200
        data = response.json()
        assert data["schedule"] == active_show.schedule[0]
        assert "B2" in data["booked"]
        assert set(data["layout"]) == {"orchestra", "mezzanine"}

    def test_seat_map_bad_schedule(self, client, active_show):
        assert client.get(f"/api/shows/{active_show.id}/seats?schedule=soon").status_code == 400

    def test_quote(self, client, active_show, welcome_code):
        response = client.post(f"/api/shows/{active_show.id}/quote", json={"seats": ["D1", "D2"]})
        assert response.json()["total"] == 100.0

        response = client.post(
            f"/api/shows/{active_show.id}/quote",
            json={"seats": ["D1", "D2"], "discount_code": "welcome10"},
        )
        assert response.json()["total"] == 90.0

        response = client.post(
            f"/api/shows/{active_show.id}/quote",
            json={"seats": ["D1"], "discount_code": "NOPE"},
        )
        assert response.status_code == 400


class TestBookingsApi:
    def test_create_and_list(self, client, user, active_show, future_schedule):
        response = client.post("/api/bookings", json={
            "show_id": active_show.id,
            "schedule": to_iso_z(future_schedule),
            "seats": ["D2", "D1"],
        })
        assert response.status_code == 201
        booking = response.json()
        assert booking["seats"] == ["D1", "D2"]
        assert booking["status"] == "confirmed"
        assert booking["payment_status"] == "paid"
        assert booking["total_price"] == 100.0

        mine = client.get("/api/bookings").json()
        assert [b["id"] for b in mine["upcoming"]] == [booking["id"]]
        assert mine["past"] == []

    def test_seat_conflict(self, client, user, active_show, future_schedule):
        payload = {"show_id": active_show.id, "schedule": to_iso_z(future_schedule), "seats": ["D3"]}
        assert client.post("/api/bookings", json=payload).status_code == 201
        response = client.post("/api/bookings", json=payload)
        assert response.status_code == 409
        assert "D3" in response.json()["detail"]

    def test_house_held_seat_conflicts(self, client, user, active_show, future_schedule):
        payload = {"show_id": active_show.id, "schedule": to_iso_z(future_schedule), "seats": ["B2"]}
        assert client.post("/api/bookings", json=payload).status_code == 409

    @pytest.mark.parametrize("change", [
        {"schedule": "not-a-date"},
        {"seats": []},
        {"seats": ["Z99"]},
        {"discount_code": "NOPE"},
    ])
    def test_rejections(self, client, user, active_show, future_schedule, change):
        payload = {"show_id": active_show.id, "schedule": to_iso_z(future_schedule), "seats": ["D1"]}
        payload.update(change)
        assert client.post("/api/bookings", json=payload).status_code == 400

    def test_performance_not_in_schedule(self, client, user, active_show, future_schedule):
        other = to_iso_z(future_schedule + timedelta(days=1))
        response = client.post("/api/bookings", json={"show_id": active_show.id, "schedule": other, "seats": ["D1"]})
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Booking Not Available")

    def test_unknown_show(self, client, user, future_schedule):
        response = client.post("/api/bookings", json={
            "show_id": "show_missing", "schedule": to_iso_z(future_schedule), "seats": ["D1"],
        })
        assert response.status_code == 404

    def test_requires_demo_user(self, client, active_show):
        assert client.get("/api/bookings").status_code == 401


class TestDiscountAndWishlistApi:
    def test_discount_code_lookup(self, client, welcome_code):
        response = client.get("/api/discount-codes/welcome10")
        assert response.status_code == 200
        assert response.json()["discount_percentage"] == 10
        assert client.get("/api/discount-codes/NOPE").status_code == 404

    def test_wishlist(self, client, user, active_show):
        assert client.post("/api/wishlist", json={"show_id": active_show.id}).status_code == 201
        assert [s["id"] for s in client.get("/api/wishlist").json()] == [active_show.id]
        assert client.get(f"/api/shows/{active_show.id}").json()["is_wishlisted"] is True

        assert client.delete(f"/api/wishlist/{active_show.id}").status_code == 200
        assert client.delete(f"/api/wishlist/{active_show.id}").status_code == 404
        assert client.post("/api/wishlist", json={"show_id": "show_missing"}).status_code == 404


class TestAccountApi:
    def test_login(self, client):
        response = client.post("/api/auth/login", json={"email": "test@example.com", "password": "password"})
        assert response.status_code == 200
        assert response.json()["title"] == "Login Successful"
        response = client.post("/api/auth/login", json={"email": "test@example.com", "password": "nope"})
        assert response.status_code == 401

    def test_register_and_verify(self, client):
        response = client.post("/api/auth/register", json={
            "name": "Grace", "email": "grace@example.com",
            "password": "secret", "confirm_password": "secret",
        })
        assert response.status_code == 201
        assert response.json()["user"]["status"] == "pending_verification"

        response = client.post("/api/auth/verify-otp", json={
            "otp": "123456", "target": "grace@example.com", "reason": "register-verify",
        })
        assert response.status_code == 200
        assert response.json()["user"]["status"] == "active"

    def test_otp_errors(self, client):
        assert client.post("/api/auth/verify-otp", json={"otp": "12"}).status_code == 400
        assert client.post("/api/auth/verify-otp", json={"otp": "000000"}).status_code == 401

    def test_notices(self, client):
        assert client.post("/api/auth/resend-otp", json={"target": "a@b.com"}).status_code == 200
        assert client.post("/api/auth/forgot-password", json={"email": "a@b.com"}).json()["title"] == (
            "Password Reset Email Sent"
        )
        assert client.post("/api/auth/resend-verification").status_code == 200

    def test_profile(self, client, user):
        assert client.get("/api/profile").json()["email"] == "alice@example.com"
        response = client.put("/api/profile", json={"name": "Alice L", "email": "alice.l@example.com"})
        assert response.status_code == 200
        assert response.json()["name"] == "Alice L"
        assert client.put("/api/profile", json={"name": "A", "email": "x@example.com"}).status_code == 400

    def test_change_password(self, client, user):
        payload = {"current_password": "password", "new_password": "n3w", "confirm_new_password": "n3w"}
        response = client.put("/api/profile/password", json=payload)
        assert response.status_code == 200
        assert response.json()["title"] == "Password Changed"
        assert client.put("/api/profile/password", json={**payload, "current_password": "x"}).status_code == 401
        assert client.put("/api/profile/password", json={**payload, "confirm_new_password": "x"}).status_code == 400


class TestAdminApi:
    def test_show_crud(self, client):
        response = client.post("/api/admin/shows", json={
            "title": "Macbeth", "description": "Ambition and murder.", "genre": "Drama",
            "venue": "Main Hall", "status": "active", "cast": "Alice Ray, Bob Smith",
            "schedule": "2030-01-05T19:30:00Z, 2030-01-02T19:30:00Z",
        })
        assert response.status_code == 201
        show = response.json()
        assert show["cast"] == ["Alice Ray", "Bob Smith"]
        assert show["schedule"] == ["2030-01-02T19:30:00Z", "2030-01-05T19:30:00Z"]

        response = client.put(f"/api/admin/shows/{show['id']}", json={"status": "closed"})
        assert response.json()["status"] == "closed"
        assert [s["id"] for s in client.get("/api/admin/shows?status=closed").json()] == [show["id"]]

        assert client.delete(f"/api/admin/shows/{show['id']}").status_code == 200
        assert client.delete(f"/api/admin/shows/{show['id']}").status_code == 404

    def test_show_validation(self, client):
        response = client.post("/api/admin/shows", json={
            "title": "Macbeth", "description": "", "genre": "Drama", "venue": "Main Hall",
        })
        assert response.status_code == 400
        response = client.post("/api/admin/shows", json={
            "title": "Macbeth", "description": "x", "genre": "Drama", "venue": "Main Hall",
            "schedule": "next tuesday",
        })
        assert response.status_code == 400
        assert client.put("/api/admin/shows/show_missing", json={"title": "X"}).status_code == 404

    def test_bookings(self, client, db, paid_booking):
        assert [b["id"] for b in client.get("/api/admin/bookings").json()] == ["bk_paid"]
        assert client.get("/api/admin/bookings/shows").json() == [{"id": "show_900", "title": "Hamlet"}]

        response = client.post("/api/admin/bookings/bk_paid/cancel")
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["payment_status"] == "refunded"
        assert db.get(Payment, "pi_paid").status == "refunded"

        assert client.post("/api/admin/bookings/bk_paid/cancel").status_code == 409
        assert client.post("/api/admin/bookings/bk_paid/refund").status_code == 400
        assert client.get("/api/admin/bookings/bk_missing").status_code == 404

    def test_discounts(self, client):
        response = client.post("/api/admin/discounts", json={"code": "spring5", "discount_percentage": 5})
        assert response.status_code == 201
        discount = response.json()
        assert discount["code"] == "SPRING5"

        assert client.post("/api/admin/discounts", json={"code": "SPRING5", "discount_percentage": 5}).status_code == 400
        assert client.post("/api/admin/discounts", json={"code": "BIG", "discount_percentage": 150}).status_code == 400

        response = client.put(f"/api/admin/discounts/{discount['id']}", json={"is_active": False})
        assert response.json()["is_active"] is False
        assert client.delete(f"/api/admin/discounts/{discount['id']}").status_code == 200
        assert client.get("/api/admin/discounts").json() == []

    def test_payment_refund(self, client, db, paid_booking):
        response = client.post("/api/admin/payments/pi_paid/refund", json={"amount": 40})
        assert response.status_code == 200
        assert response.json()["status"] == "partially_refunded"

        response = client.post("/api/admin/payments/pi_paid/refund")
        assert response.json()["refund_amount"] == 100.0
        assert db.get(Booking, "bk_paid").payment_status == "refunded"
        assert client.post("/api/admin/payments/pi_paid/refund").status_code == 400
        assert client.post("/api/admin/payments/pi_missing/refund").status_code == 404
        assert client.get("/api/admin/payments?date_from=yesterday").status_code == 400

    def test_reviews(self, client, db, active_show):
        db.add(Review(
            id="rev_1", show_id=active_show.id, user_id="user2", user_name="Bob",
            rating=2, comment="Not for me at all.", created_at=utc_now(), likes=0,
        ))
        db.commit()
        assert [r["id"] for r in client.get("/api/admin/reviews?rating=2").json()] == ["rev_1"]
        assert client.post("/api/admin/reviews/rev_1/block").status_code == 200
        assert client.get(f"/api/shows/{active_show.id}/reviews").json() == []
        assert client.delete("/api/admin/reviews/rev_1").status_code == 200
        assert client.delete("/api/admin/reviews/rev_1").status_code == 404

    def test_users(self, client, user):
        assert [u["id"] for u in client.get("/api/admin/users?search=alice").json()] == ["user1"]
        response = client.put("/api/admin/users/user1/status", json={"status": "suspended"})
        assert response.json()["status"] == "suspended"
        assert client.put("/api/admin/users/user1/status", json={"status": "banned"}).status_code == 400
        assert client.delete("/api/admin/users/user1").status_code == 200
        assert client.get("/api/admin/users/user1").status_code == 404

    def test_settings(self, client):
        assert client.get("/api/admin/settings/general").json()["max_seats_per_booking"] == 5
        response = client.put("/api/admin/settings/general", json={"max_seats_per_booking": 2})
        assert response.status_code == 200
        assert client.get("/api/admin/settings").json()["general"]["max_seats_per_booking"] == 2
        assert client.put("/api/admin/settings/general", json={"max_seats_per_booking": 0}).status_code == 400
        assert client.get("/api/admin/settings/billing").status_code == 404

    def test_dashboard_and_analytics(self, client, paid_booking):
        stats = client.get("/api/admin/dashboard").json()
        assert stats["total_bookings"] == 1
        assert stats["total_revenue"] == 100.0

        report = client.get("/api/admin/analytics").json()
        assert report["tickets_sold"] == 2
        assert client.get("/api/admin/analytics?date_from=2026-10-10&date_to=2026-10-01").status_code == 400
