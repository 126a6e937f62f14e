"""
Settings Service for the admin settings screens (general, venue, notifications)
"""
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator
from sqlalchemy.orm import Session

from curtaincall.core.config import get_settings
from curtaincall.core.logging_config import LoggingConfig
from curtaincall.models.app_setting import AppSetting, SettingGroup

logger = LoggingConfig.get_logger(__name__)


class GeneralSettings(BaseModel):
    app_name: str = Field(default_factory=lambda: get_settings().app_name, min_length=1)
    default_currency: str = Field(default_factory=lambda: get_settings().currency, min_length=3, max_length=3)
    max_seats_per_booking: int = Field(
        default_factory=lambda: get_settings().max_seats_per_booking, ge=1, le=20
    )

    @field_validator("app_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("App name is required")
        return v

    @field_validator("default_currency", mode="before")
    @classmethod
    def upper_currency(cls, v):
        if not isinstance(v, str):
            return v
        v = v.strip().upper()
        if not v.isalpha():
            raise ValueError("Currency must be a 3-letter code")
        return v


class VenueSettings(BaseModel):
    venue_name: str = "Grand Theatre"
    address: str = "123 Main St, Anytown, USA"
    default_hall: str = "Main Hall"

    @field_validator("venue_name")
    @classmethod
    def require_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Venue name is required")
        return v


class NotificationSettings(BaseModel):
    admin_email: Optional[EmailStr] = None
    send_booking_confirmation: bool = True
    send_cancellation_notice: bool = True

    @field_validator("admin_email", mode="before")
    @classmethod
    def blank_email(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


GROUP_SCHEMAS: Dict[str, Type[BaseModel]] = {
    SettingGroup.GENERAL.value: GeneralSettings,
    SettingGroup.VENUE.value: VenueSettings,
    SettingGroup.NOTIFICATIONS.value: NotificationSettings,
}


def _validation_message(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        field = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{field}: {err.get('msg')}" if field else err.get("msg", ""))
    return "Invalid Settings: " + "; ".join(parts)


class SettingsService:
    """Service for reading and saving grouped application settings"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _schema(group: str) -> Type[BaseModel]:
        schema = GROUP_SCHEMAS.get(group)
        if schema is None:
            raise ValueError(f"Unknown settings group '{group}'")
        return schema

    def get_group(self, group: str) -> Dict[str, Any]:
        """
        Stored values of a group merged over its defaults

        Raises:
            ValueError: If the group is unknown
        """
        schema = self._schema(group)
        stored = self.db.get(AppSetting, group)
        values = schema().model_dump(mode="json")
        if stored and stored.value:
            values.update({k: v for k, v in stored.value.items() if k in values})
        return values

    def all_groups(self) -> Dict[str, Dict[str, Any]]:
        return {group: self.get_group(group) for group in GROUP_SCHEMAS}

    def save_group(self, group: str, data: Dict[str, Any], updated_by: Optional[str] = None) -> Dict[str, Any]:
        """
        Validate and store a group

        Args:
            group: 'general', 'venue' or 'notifications'
            data: Field values; omitted fields keep their current value
            updated_by: Who saved the settings

        Returns:
            Saved values

        Raises:
            ValueError: If the group is unknown or the values are invalid
        """
        schema = self._schema(group)
        merged = {**self.get_group(group), **data}
        try:
            values = schema(**merged).model_dump(mode="json")
        except ValidationError as e:
            raise ValueError(_validation_message(e)) from e

        setting = self.db.get(AppSetting, group)
        if setting:
            setting.value = values
            setting.updated_by = updated_by
        else:
            setting = AppSetting(key=group, value=values, updated_by=updated_by)
            self.db.add(setting)

        self.db.commit()
        logger.info(f"Saved {group} settings", extra={"updated_by": updated_by})
        return values

    def max_seats_per_booking(self) -> int:
        return int(self.get_group(SettingGroup.GENERAL.value)["max_seats_per_booking"])
