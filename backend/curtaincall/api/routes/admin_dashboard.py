"""
Admin API routes for the dashboard and analytics report
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.services.analytics_service import AnalyticsService
from curtaincall.utils.datetime_utils import parse_optional_date

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/dashboard")
async def get_dashboard(db: Session = Depends(get_db)):
    return AnalyticsService(db).dashboard()


@router.get("/analytics")
async def get_analytics(
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Report for a date range (defaults to the last 30 days)"""
    try:
        return AnalyticsService(db).report(parse_optional_date(date_from), parse_optional_date(date_to))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
