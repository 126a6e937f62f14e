"""
Health check endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from curtaincall import __version__
from curtaincall.core.config import get_settings
from curtaincall.core.database import get_db
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.show import Show
from curtaincall.utils.datetime_utils import utc_now_iso

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """
    Health check with data store status

    Returns:
        dict: Health status
    """
    settings = get_settings()
    status = {
        "status": "healthy",
        "timestamp": utc_now_iso(),
        "service": settings.app_name,
        "version": __version__,
        "environment": settings.app_env,
        "components": {},
    }

    try:
        db.execute(text("SELECT 1"))
        status["components"]["database"] = {
            "status": "healthy",
            "shows": db.query(Show).count(),
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        status["status"] = "unhealthy"
        status["components"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {e}",
            "error": type(e).__name__,
        }

    return status
