"""
API routes for the stubbed account flows and the profile
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from curtaincall.core.auth import require_user
from curtaincall.core.database import get_db
from curtaincall.core.exceptions import InvalidCredentialsError
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.user import User
from curtaincall.services.account_service import AccountService
from curtaincall.services.user_service import UserService

router = APIRouter(tags=["account"])
logger = LoggingConfig.get_logger(__name__)


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    name: str = Field(..., description="Display name")
    email: str
    password: str
    confirm_password: str


class VerifyOtpRequest(BaseModel):
    otp: str = Field(..., description="6-digit code")
    target: str = Field("", description="E-mail or phone the code was sent to")
    reason: str = Field("login", description="'login', 'register-verify' or 'reset-password'")


class ResendOtpRequest(BaseModel):
    target: str
    reason: str = "login"


class ForgotPasswordRequest(BaseModel):
    email: str


class ProfileUpdateRequest(BaseModel):
    name: str
    email: str


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str
    confirm_new_password: str


@router.post("/api/auth/login")
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    try:
        return AccountService(db).login(request.email, request.password).to_dict()
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/api/auth/register", status_code=201)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    try:
        result = AccountService(db).register(
            request.name, request.email, request.password, request.confirm_password
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.to_dict()


@router.post("/api/auth/verify-otp")
async def verify_otp(request: VerifyOtpRequest, db: Session = Depends(get_db)):
    try:
        return AccountService(db).verify_otp(request.otp, request.target, request.reason).to_dict()
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/api/auth/resend-otp")
async def resend_otp(request: ResendOtpRequest, db: Session = Depends(get_db)):
    return AccountService(db).resend_otp(request.target, request.reason).to_dict()


@router.post("/api/auth/forgot-password")
async def forgot_password(request: ForgotPasswordRequest, db: Session = Depends(get_db)):
    return AccountService(db).request_password_reset(request.email).to_dict()


@router.post("/api/auth/resend-verification")
async def resend_verification(db: Session = Depends(get_db)):
    return AccountService(db).resend_verification().to_dict()


@router.get("/api/profile")
async def get_profile(user: User = Depends(require_user)):
    return user.to_dict()


@router.put("/api/profile")
async def update_profile(
    request: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    """Update the signed-in user's name and e-mail"""
    try:
        updated = UserService(db).update_profile(user, request.name, request.email)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return updated.to_dict()


@router.put("/api/profile/password")
async def change_password(
    request: PasswordChangeRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_user),
):
    try:
        result = AccountService(db).change_password(
            user, request.current_password, request.new_password, request.confirm_new_password
        )
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.to_dict()
