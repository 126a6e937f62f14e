"""
Database models
"""
from curtaincall.models.app_setting import AppSetting, SettingGroup
from curtaincall.models.booking import Booking, BookingStatus, PaymentState
from curtaincall.models.discount import Discount
from curtaincall.models.payment import Payment, PaymentStatus
from curtaincall.models.review import Review
from curtaincall.models.show import Show, ShowStatus
from curtaincall.models.user import User, UserRole, UserStatus
from curtaincall.models.wishlist import WishlistItem

__all__ = [
    "AppSetting",
    "SettingGroup",
    "Booking",
    "BookingStatus",
    "PaymentState",
    "Discount",
    "Payment",
    "PaymentStatus",
    "Review",
    "Show",
    "ShowStatus",
    "User",
    "UserRole",
    "UserStatus",
    "WishlistItem",
]
