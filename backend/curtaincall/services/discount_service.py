"""
Discount Service for promo codes
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.discount import Discount
from curtaincall.utils.datetime_utils import utc_now
from curtaincall.utils.ids import new_id

logger = LoggingConfig.get_logger(__name__)

_UNSET = object()


def _normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def _check_percentage(value) -> int:
    try:
        pct = int(value)
    except (TypeError, ValueError):
        raise ValueError("Invalid Data: discount percentage must be a number between 1 and 100.")
    if pct < 1 or pct > 100:
        raise ValueError("Invalid Data: discount percentage must be between 1 and 100.")
    return pct


def _check_window(valid_from: Optional[datetime], valid_until: Optional[datetime]) -> None:
    if valid_from and valid_until and valid_until <= valid_from:
        raise ValueError("Invalid Data: 'valid until' must be after 'valid from'.")


class DiscountService:
    """Service for looking up and managing discount codes"""

    def __init__(self, db: Session):
        self.db = db

    def get_discount(self, discount_id: str) -> Optional[Discount]:
        return self.db.get(Discount, discount_id)

    def get_by_code(self, code: str) -> Optional[Discount]:
        return self.db.query(Discount).filter(Discount.code == _normalize_code(code)).first()

    def lookup_code(self, code: str, now: Optional[datetime] = None) -> Optional[Discount]:
        """Discount for a code entered at checkout, or None if it cannot be redeemed"""
        discount = self.get_by_code(code)
        if discount and discount.is_redeemable(now or utc_now()):
            return discount
        return None

    def list_discounts(self) -> List[Discount]:
        return self.db.query(Discount).order_by(Discount.created_at.desc()).all()

    def create_discount(
        self,
        code: str,
        discount_percentage,
        description: str = "",
        is_active: bool = True,
        valid_from: Optional[datetime] = None,
        valid_until: Optional[datetime] = None,
        usage_limit: Optional[int] = None,
    ) -> Discount:
        """
        Create a discount code

        Raises:
            ValueError: On a missing code, a percentage outside 1..100 or a duplicate code
        """
        code = _normalize_code(code)
        if not code:
            raise ValueError("Invalid Data: discount code is required.")
        pct = _check_percentage(discount_percentage)
        _check_window(valid_from, valid_until)
        if usage_limit is not None and usage_limit < 1:
            raise ValueError("Invalid Data: usage limit must be at least 1.")
        if self.get_by_code(code):
            raise ValueError(f"Discount code '{code}' already exists")

        discount = Discount(
            id=new_id("disc"),
            code=code,
            discount_percentage=pct,
            description=(description or "").strip(),
            is_active=is_active,
            valid_from=valid_from,
            valid_until=valid_until,
            usage_limit=usage_limit,
            times_used=0,
            created_at=utc_now(),
        )
        self.db.add(discount)
        self.db.commit()
        self.db.refresh(discount)
        logger.info(f"Created discount {discount.code} ({discount.discount_percentage}%)")
        return discount

    def update_discount(
        self,
        discount_id: str,
        code=_UNSET,
        discount_percentage=_UNSET,
        description=_UNSET,
        is_active=_UNSET,
        valid_from=_UNSET,
        valid_until=_UNSET,
        usage_limit=_UNSET,
    ) -> Optional[Discount]:
        """Partial update; arguments left out are not touched"""
        discount = self.get_discount(discount_id)
        if not discount:
            return None

        try:
            self._apply_update(
                discount, code, discount_percentage, description,
                is_active, valid_from, valid_until, usage_limit,
            )
        except ValueError:
            self.db.rollback()
            raise

        self.db.commit()
        self.db.refresh(discount)
        logger.info(f"Updated discount {discount.id} ({discount.code})")
        return discount

    def _apply_update(
        self, discount, code, discount_percentage, description,
        is_active, valid_from, valid_until, usage_limit,
    ) -> None:
        if code is not _UNSET:
            new_code = _normalize_code(code)
            if not new_code:
                raise ValueError("Invalid Data: discount code is required.")
            other = self.get_by_code(new_code)
            if other and other.id != discount.id:
                raise ValueError(f"Discount code '{new_code}' already exists")
            discount.code = new_code
        if discount_percentage is not _UNSET:
            discount.discount_percentage = _check_percentage(discount_percentage)
        if description is not _UNSET:
            discount.description = (description or "").strip()
        if is_active is not _UNSET:
            discount.is_active = bool(is_active)
        if valid_from is not _UNSET:
            discount.valid_from = valid_from
        if valid_until is not _UNSET:
            discount.valid_until = valid_until
        if usage_limit is not _UNSET:
            if usage_limit is not None and usage_limit < 1:
                raise ValueError("Invalid Data: usage limit must be at least 1.")
            discount.usage_limit = usage_limit
        _check_window(discount.valid_from, discount.valid_until)

    def delete_discount(self, discount_id: str) -> bool:
        discount = self.get_discount(discount_id)
        if not discount:
            return False
        self.db.delete(discount)
        self.db.commit()
        logger.info(f"Deleted discount {discount_id}")
        return True

    def redeem(self, discount: Discount) -> None:
        """Count one use; committed together with the booking"""
        discount.times_used = (discount.times_used or 0) + 1
