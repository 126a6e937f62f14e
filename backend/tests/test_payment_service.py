"""
Tests for PaymentService refunds and listing
"""
from datetime import datetime, timezone

import pytest

from curtaincall.models.booking import Booking, BookingStatus, PaymentState
from curtaincall.models.payment import Payment, PaymentStatus
from curtaincall.services.payment_service import PaymentService


def _payment(payment_id, status=PaymentStatus.SUCCEEDED, amount=100.0, created=None, **kwargs):
    return Payment(
        id=payment_id,
        booking_id=kwargs.pop("booking_id", f"bk_{payment_id}"),
        user_id="user2",
        user_name=kwargs.pop("user_name", "Bob"),
        amount=amount,
        currency="USD",
        status=status.value,
        payment_method=kwargs.pop("payment_method", "Card"),
        created_at=created or datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc),
        show_title=kwargs.pop("show_title", "Hamlet"),
        **kwargs,
    )


def _booking(booking_id):
    return Booking(
        id=booking_id,
        show_id="show_900",
        show_title="Hamlet",
        user_id="user2",
        user_name="Bob",
        venue="Main Hall",
        schedule=datetime(2026, 11, 6, 19, 30, tzinfo=timezone.utc),
        seats=["D1", "D2"],
        total_price=100.0,
        booking_date=datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc),
        status=BookingStatus.CONFIRMED.value,
        payment_status=PaymentState.PAID.value,
    )


class TestRefunds:
    def test_full_refund(self, db):
        db.add(_payment("pi_1"))
        db.commit()

        payment = PaymentService(db).trigger_refund("pi_1")
        assert payment.status == PaymentStatus.REFUNDED.value
        assert payment.refund_amount == 100.0
        assert payment.net_amount == 0.0

    def test_partial_refunds_accumulate(self, db):
        db.add(_payment("pi_1"))
        db.commit()
        service = PaymentService(db)

        payment = service.trigger_refund("pi_1", 30.0)
        assert payment.status == PaymentStatus.PARTIALLY_REFUNDED.value
        assert payment.refund_amount == 30.0
        assert payment.refundable_amount == 70.0

        payment = service.trigger_refund("pi_1", 20.0)
        assert payment.refund_amount == 50.0
        assert payment.net_amount == 50.0

    def test_amount_not_below_remaining_is_full_refund(self, db):
        db.add(_payment("pi_1"))
        db.commit()
        payment = PaymentService(db).trigger_refund("pi_1", 150.0)
        assert payment.status == PaymentStatus.REFUNDED.value
        assert payment.refund_amount == 100.0

    @pytest.mark.parametrize("status", [PaymentStatus.FAILED, PaymentStatus.PENDING, PaymentStatus.REFUNDED])
    def test_not_refundable(self, db, status):
        db.add(_payment("pi_1", status=status))
        db.commit()
        with pytest.raises(ValueError, match="cannot be refunded"):
            PaymentService(db).trigger_refund("pi_1")

    def test_missing_payment(self, db):
        assert PaymentService(db).trigger_refund("pi_missing") is None

    def test_full_refund_marks_booking_refunded(self, db):
        db.add_all([_booking("bk_1"), _payment("pi_1", booking_id="bk_1")])
        db.commit()
        service = PaymentService(db)

        service.trigger_refund("pi_1", 40.0)
        assert db.get(Booking, "bk_1").payment_status == PaymentState.PAID.value

        service.trigger_refund("pi_1")
        assert db.get(Booking, "bk_1").payment_status == PaymentState.REFUNDED.value


class TestListAdmin:
    @pytest.fixture
    def payments(self, db):
        db.add_all([
            _payment("pi_a", created=datetime(2026, 9, 1, 10, tzinfo=timezone.utc), user_name="Alice"),
            _payment("pi_b", status=PaymentStatus.FAILED, created=datetime(2026, 9, 15, 23, 30, tzinfo=timezone.utc)),
            _payment("pi_c", created=datetime(2026, 10, 2, 9, tzinfo=timezone.utc), payment_method="PayPal"),
        ])
        db.commit()

    def test_newest_first(self, db, payments):
        assert [p.id for p in PaymentService(db).list_admin()] == ["pi_c", "pi_b", "pi_a"]

    def test_status_and_search(self, db, payments):
        service = PaymentService(db)
        assert [p.id for p in service.list_admin(status="failed")] == ["pi_b"]
        assert [p.id for p in service.list_admin(search="alice")] == ["pi_a"]
        assert [p.id for p in service.list_admin(search="paypal")] == ["pi_c"]

    def test_date_range_includes_whole_end_day(self, db, payments):
        service = PaymentService(db)
        start = datetime(2026, 9, 1, tzinfo=timezone.utc)
        end = datetime(2026, 9, 15, tzinfo=timezone.utc)
        assert [p.id for p in service.list_admin(date_from=start, date_to=end)] == ["pi_b", "pi_a"]

    def test_half_open_range_is_ignored(self, db, payments):
        start = datetime(2026, 10, 1, tzinfo=timezone.utc)
        assert len(PaymentService(db).list_admin(date_from=start)) == 3
