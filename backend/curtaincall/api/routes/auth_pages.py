"""
Authentication web pages (stubbed sign-in, registration and verification)
"""
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.core.templates import (
    redirect_with_notice,
    render_template,
    split_message
)
from curtaincall.services.account_service import AccountService, otp_url

router = APIRouter(tags=["auth_pages"])


def _follow(result, fallback: str = "/"):
    return redirect_with_notice(result.redirect_to or fallback, result.title, result.detail)


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Login page"""
    return render_template("auth/login.html", {}, request)


@router.post("/login")
async def login_form(
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        result = AccountService(db).login(email, password)
    except ValueError as e:
        return redirect_with_notice("/login", "Login Failed", str(e), "destructive")
    return _follow(result)


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    """Register page"""
    return render_template("auth/register.html", {}, request)


@router.post("/register")
async def register_form(
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        result = AccountService(db).register(name, email, password, confirm_password)
    except ValueError as e:
        return redirect_with_notice("/register", "Registration Failed", str(e), "destructive")
    return _follow(result)


@router.get("/forgot-password", response_class=HTMLResponse)
async def forgot_password_page(request: Request, step: str = "request"):
    return render_template("auth/forgot_password.html", {"step": step}, request)


@router.post("/forgot-password")
async def forgot_password_form(email: str = Form(""), db: Session = Depends(get_db)):
    return _follow(AccountService(db).request_password_reset(email), "/login")


@router.get("/verify-email", response_class=HTMLResponse)
async def verify_email_page(request: Request):
    return render_template("auth/verify_email.html", {}, request)


@router.post("/verify-email/resend")
async def resend_verification_form(db: Session = Depends(get_db)):
    return _follow(AccountService(db).resend_verification(), "/verify-email")


@router.get("/verify-otp", response_class=HTMLResponse)
async def verify_otp_page(request: Request, target: str = "", reason: str = "login"):
    return render_template("auth/verify_otp.html", {"target": target, "reason": reason}, request)


@router.post("/verify-otp")
async def verify_otp_form(
    otp: str = Form(""),
    target: str = Form(""),
    reason: str = Form("login"),
    db: Session = Depends(get_db),
):
    try:
        result = AccountService(db).verify_otp(otp, target, reason)
    except ValueError as e:
        title, detail = split_message(str(e), "Verification Failed")
        return redirect_with_notice(otp_url(target, reason), title, detail, "destructive")
    return _follow(result)


@router.post("/verify-otp/resend")
async def resend_otp_form(
    target: str = Form(""),
    reason: str = Form("login"),
    db: Session = Depends(get_db),
):
    return _follow(AccountService(db).resend_otp(target, reason))
