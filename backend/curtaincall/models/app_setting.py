"""
Application setting model for the admin settings screens
"""
from enum import Enum

from sqlalchemy import JSON, Column, String

from curtaincall.core.database import Base, UTCDateTime
from curtaincall.utils.datetime_utils import utc_now


class SettingGroup(str, Enum):
    """Settings are stored as one JSON document per group"""
    GENERAL = "general"
    VENUE = "venue"
    NOTIFICATIONS = "notifications"


class AppSetting(Base):
    """Saved values of one settings group"""
    __tablename__ = "app_settings"

    key = Column(String(64), primary_key=True)
    value = Column(JSON, nullable=False, default=dict)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)
    updated_by = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<AppSetting(key='{self.key}')>"
