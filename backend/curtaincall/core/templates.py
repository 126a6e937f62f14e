"""
Template rendering utilities
"""
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from curtaincall.core.config import get_settings
from curtaincall.utils.datetime_utils import ensure_utc

# Get templates directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
TEMPLATES_DIR = BASE_DIR / "frontend" / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def format_money(value, currency: Optional[str] = None) -> str:
    currency = currency or get_settings().currency
    symbol = "$" if currency == "USD" else f"{currency} "
    return f"{symbol}{float(value or 0):,.2f}"


def format_performance(value: Optional[datetime]) -> str:
    """``Friday, Nov 07, 2026 - 07:30 PM``"""
    if value is None:
        return ""
    return ensure_utc(value).strftime("%A, %b %d, %Y - %I:%M %p")


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return ensure_utc(value).strftime("%b %d, %Y")


templates.env.filters["money"] = format_money
templates.env.filters["performance"] = format_performance
templates.env.filters["date"] = format_date
templates.env.globals["settings"] = get_settings


def render_template(template_name: str, context: dict, request: Request):
    """Render template with context and the notice carried in the query string"""
    notice = None
    if request.query_params.get("notice"):
        notice = {
            "title": request.query_params.get("notice"),
            "detail": request.query_params.get("detail", ""),
            "variant": request.query_params.get("variant", "default"),
        }
    return templates.TemplateResponse(
        request,
        template_name,
        {"notice": notice, **context},
    )


def split_message(message: str, default_title: str = "Error") -> Tuple[str, str]:
    """``"Invalid Code: not valid."`` -> ``("Invalid Code", "not valid.")``"""
    title, sep, detail = message.partition(": ")
    if sep and len(title) <= 40:
        return title, detail
    return default_title, message


def redirect_with_notice(
    url: str,
    title: str,
    detail: str = "",
    variant: str = "default",
    status_code: int = 303,
) -> RedirectResponse:
    """Redirect after a form post, carrying a toast-style notice"""
    params = {"notice": title, "variant": variant}
    if detail:
        params["detail"] = detail
    separator = "&" if "?" in url else "?"
    return RedirectResponse(f"{url}{separator}{urlencode(params)}", status_code=status_code)
