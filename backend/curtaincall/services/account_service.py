"""
Account Service for the sign-in, registration and verification flows

Authentication is a stub: credentials and one-time codes are checked against
fixed demo values from settings and nothing is ever sent.
"""
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from curtaincall.core.config import get_settings
from curtaincall.core.exceptions import InvalidCredentialsError
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.user import User, UserRole, UserStatus
from curtaincall.services.user_service import UserService, normalize_email
from curtaincall.utils.datetime_utils import utc_now
from curtaincall.utils.ids import new_id

logger = LoggingConfig.get_logger(__name__)

_OTP_RE = re.compile(r"^\d{6}$")

OTP_REDIRECTS = {
    "login": "/",
    "reset-password": "/forgot-password?step=reset",
    "register-verify": "/",
}


@dataclass
class AccountResult:
    """Outcome of an account flow: a notice to show and where to go next"""
    title: str
    detail: str
    redirect_to: Optional[str] = None
    user: Optional[User] = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "detail": self.detail,
            "redirect_to": self.redirect_to,
            "user": self.user.to_dict() if self.user else None,
        }


def otp_url(target: str, reason: str) -> str:
    return "/verify-otp?" + urlencode({"target": target, "reason": reason})


class AccountService:
    """Stubbed account flows"""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserService(db)

    def login(self, email: str, password: str) -> AccountResult:
        """
        Sign in with the demo credentials

        Raises:
            InvalidCredentialsError: For anything but the demo e-mail and password
        """
        settings = get_settings()
        email = (email or "").strip()
        if email.lower() != settings.demo_login_email.lower() or password != settings.demo_login_password:
            logger.info(f"Failed login attempt for {email}")
            raise InvalidCredentialsError("Invalid email or password.")

        user = self.users.get_user_by_email(email)
        if user:
            user.last_login = utc_now()
            self.db.commit()
        logger.info(f"User {email} logged in")
        return AccountResult("Login Successful", "Welcome back!", "/", user)

    def register(self, name: str, email: str, password: str, confirm_password: str) -> AccountResult:
        """
        Start a registration; the account stays pending until the OTP is verified

        Raises:
            ValueError: Passwords differ, name missing or e-mail invalid
        """
        if password != confirm_password:
            raise ValueError("Passwords do not match.")
        if not password:
            raise ValueError("Password is required.")
        name = (name or "").strip()
        if len(name) < 2:
            raise ValueError("Name must be at least 2 characters")
        email = normalize_email(email)

        user = self.users.get_user_by_email(email)
        if user is None:
            user = User(
                id=new_id("user"),
                name=name,
                email=email,
                role=UserRole.USER.value,
                status=UserStatus.PENDING_VERIFICATION.value,
                created_at=utc_now(),
                booking_count=0,
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"Registered pending user {user.id} ({email})")
        elif user.status != UserStatus.PENDING_VERIFICATION.value:
            raise ValueError("An account with this email already exists.")

        return AccountResult(
            "Registration Initiated",
            "An OTP has been sent to your email for verification.",
            otp_url(email, "register-verify"),
            user,
        )

    def verify_otp(self, otp: str, target: str, reason: str) -> AccountResult:
        """
        Check a one-time code

        Raises:
            ValueError: If the code is not 6 digits
            InvalidCredentialsError: If the code is wrong
        """
        otp = (otp or "").strip()
        if not _OTP_RE.match(otp):
            raise ValueError("Invalid OTP: please enter a 6-digit OTP.")
        if otp != get_settings().demo_otp:
            logger.info(f"OTP verification failed for {target} ({reason})")
            raise InvalidCredentialsError("Verification Failed: invalid OTP. Please try again.")

        user = None
        if reason == "register-verify" and target:
            user = self.users.get_user_by_email(target)
            if user and user.status == UserStatus.PENDING_VERIFICATION.value:
                user.status = UserStatus.ACTIVE.value
                self.db.commit()
                logger.info(f"Activated user {user.id}")

        detail = (
            "Your account is now active."
            if reason == "register-verify"
            else "Your identity has been verified."
        )
        return AccountResult("Verification Successful", detail, OTP_REDIRECTS.get(reason, "/"), user)

    def resend_otp(self, target: str, reason: str) -> AccountResult:
        logger.info(f"OTP resend requested for {target} ({reason})")
        return AccountResult("OTP Resent", f"A new OTP has been sent to {target}.", otp_url(target, reason))

    def request_password_reset(self, email: str) -> AccountResult:
        logger.info(f"Password reset requested for {email}")
        return AccountResult("Password Reset Email Sent", "Please check your inbox for instructions.")

    def resend_verification(self) -> AccountResult:
        return AccountResult("Verification Email Resent", "Please check your inbox again.")

    def change_password(self, user: User, current: str, new: str, confirm: str) -> AccountResult:
        """
        Change the signed-in user's password; nothing is stored

        Raises:
            InvalidCredentialsError: If the current password is not the demo password
            ValueError: If the new password is empty or the confirmation differs
        """
        if current != get_settings().demo_login_password:
            logger.info(f"Password change rejected for user {user.id}")
            raise InvalidCredentialsError("Could not update password. Please check your current password.")
        if not new:
            raise ValueError("New password is required.")
        if new != confirm:
            raise ValueError("New passwords do not match.")
        logger.info(f"Password changed for user {user.id}")
        return AccountResult("Password Changed", "Your password has been updated successfully.", "/profile", user)
