"""
Admin API routes for application settings
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from curtaincall.core.database import get_db
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.services.settings_service import GROUP_SCHEMAS, SettingsService

router = APIRouter(prefix="/api/admin/settings", tags=["admin"])
logger = LoggingConfig.get_logger(__name__)


@router.get("")
async def get_all_settings(db: Session = Depends(get_db)):
    return SettingsService(db).all_groups()


@router.get("/{group}")
async def get_settings_group(group: str, db: Session = Depends(get_db)):
    if group not in GROUP_SCHEMAS:
        raise HTTPException(status_code=404, detail=f"Settings group '{group}' not found")
    return SettingsService(db).get_group(group)


@router.put("/{group}")
async def save_settings_group(group: str, values: Dict[str, Any], db: Session = Depends(get_db)):
    """Validate and store one settings group"""
    if group not in GROUP_SCHEMAS:
        raise HTTPException(status_code=404, detail=f"Settings group '{group}' not found")
    try:
        return SettingsService(db).save_group(group, values, updated_by="admin")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
