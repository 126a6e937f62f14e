"""
Tests for DiscountService
"""
from datetime import timedelta

import pytest

from curtaincall.models.discount import Discount
from curtaincall.services.discount_service import DiscountService
from curtaincall.utils.datetime_utils import utc_now


class TestRedeemable:
    def test_window_and_usage_limit(self):
        now = utc_now()
        discount = Discount(code="X", discount_percentage=10, is_active=True, times_used=0)
        assert discount.is_redeemable(now)

        discount.valid_from = now + timedelta(days=1)
        assert not discount.is_redeemable(now)
        discount.valid_from = None

        discount.valid_until = now - timedelta(seconds=1)
        assert not discount.is_redeemable(now)
        discount.valid_until = None

        discount.usage_limit = 3
        discount.times_used = 3
        assert not discount.is_redeemable(now)

        discount.times_used = 2
        discount.is_active = False
        assert not discount.is_redeemable(now)


class TestDiscountService:
    def test_create_normalizes_code(self, db):
        discount = DiscountService(db).create_discount(" spring15 ", 15, "Spring offer")
        assert discount.code == "SPRING15"
        assert discount.times_used == 0
        assert discount.is_active is True

    def test_lookup_is_case_insensitive(self, db):
        service = DiscountService(db)
        service.create_discount("SUMMER20", 20)
        assert service.lookup_code("summer20").discount_percentage == 20
        assert service.lookup_code("unknown") is None

    def test_lookup_skips_inactive(self, db):
        service = DiscountService(db)
        service.create_discount("OFF", 5, is_active=False)
        assert service.get_by_code("off") is not None
        assert service.lookup_code("off") is None

    @pytest.mark.parametrize("pct", [0, 101, "abc"])
    def test_percentage_range(self, db, pct):
        with pytest.raises(ValueError, match="Invalid Data"):
            DiscountService(db).create_discount("BAD", pct)

    def test_duplicate_code(self, db):
        service = DiscountService(db)
        service.create_discount("ONCE", 10)
        with pytest.raises(ValueError, match="already exists"):
            service.create_discount("once", 20)

    def test_window_must_be_ordered(self, db):
        now = utc_now()
        with pytest.raises(ValueError, match="valid until"):
            DiscountService(db).create_discount("WIN", 10, valid_from=now, valid_until=now - timedelta(days=1))

    def test_usage_limit_must_be_positive(self, db):
        with pytest.raises(ValueError, match="usage limit"):
            DiscountService(db).create_discount("LIM", 10, usage_limit=0)

    def test_update_partial(self, db):
        service = DiscountService(db)
        discount = service.create_discount("EDIT", 10, "Before")
        updated = service.update_discount(discount.id, discount_percentage=25, is_active=False)
        assert updated.discount_percentage == 25
        assert updated.is_active is False
        assert updated.description == "Before"
        assert service.update_discount("disc_missing", description="x") is None

    def test_update_rejects_taken_code_and_keeps_values(self, db):
        service = DiscountService(db)
        service.create_discount("FIRST", 10)
        second = service.create_discount("SECOND", 20)

        with pytest.raises(ValueError, match="already exists"):
            service.update_discount(second.id, code="first")

        db.expire_all()
        assert service.get_discount(second.id).code == "SECOND"

    def test_list_newest_first_and_delete(self, db):
        service = DiscountService(db)
        older = service.create_discount("OLDER", 10)
        older.created_at = utc_now() - timedelta(days=5)
        db.commit()
        newer = service.create_discount("NEWER", 10)

        assert [d.code for d in service.list_discounts()] == ["NEWER", "OLDER"]
        assert service.delete_discount(newer.id) is True
        assert service.delete_discount(newer.id) is False

    def test_redeem_counts_use(self, db):
        service = DiscountService(db)
        discount = service.create_discount("USE", 10, usage_limit=1)
        service.redeem(discount)
        db.commit()
        assert discount.times_used == 1
        assert service.lookup_code("USE") is None
