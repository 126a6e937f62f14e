"""
Tests for SettingsService
"""
import pytest

from curtaincall.models.app_setting import AppSetting
from curtaincall.services.settings_service import SettingsService


class TestSettingsService:
    def test_defaults(self, db):
        groups = SettingsService(db).all_groups()
        assert set(groups) == {"general", "venue", "notifications"}
        assert groups["general"]["app_name"] == "CurtainCall"
        assert groups["general"]["max_seats_per_booking"] == 5
        assert groups["venue"]["venue_name"] == "Grand Theatre"
        assert groups["notifications"]["admin_email"] is None
        assert groups["notifications"]["send_booking_confirmation"] is True

    def test_save_merges_with_current_values(self, db):
        service = SettingsService(db)
        saved = service.save_group("general", {"default_currency": "eur"}, updated_by="admin")
        assert saved["default_currency"] == "EUR"
        assert saved["app_name"] == "CurtainCall"

        service.save_group("general", {"max_seats_per_booking": "8"})
        assert service.get_group("general")["default_currency"] == "EUR"
        assert service.max_seats_per_booking() == 8
        assert db.get(AppSetting, "general").updated_by is None

    def test_blank_admin_email_is_none(self, db):
        saved = SettingsService(db).save_group("notifications", {"admin_email": "  "})
        assert saved["admin_email"] is None

    @pytest.mark.parametrize("group,values", [
        ("general", {"max_seats_per_booking": 0}),
        ("general", {"default_currency": "E1"}),
        ("general", {"app_name": "  "}),
        ("venue", {"venue_name": ""}),
        ("notifications", {"admin_email": "not-an-email"}),
    ])
    def test_invalid_values(self, db, group, values):
        service = SettingsService(db)
        with pytest.raises(ValueError):
            service.save_group(group, values)
        assert db.get(AppSetting, group) is None

    def test_unknown_group(self, db):
        with pytest.raises(ValueError, match="Unknown settings group"):
            SettingsService(db).get_group("billing")

    def test_currency_is_normalised_before_length_check(self, db):
        saved = SettingsService(db).save_group("general", {"default_currency": " usd "})
        assert saved["default_currency"] == "USD"

    def test_error_message_has_title(self, db):
        with pytest.raises(ValueError) as exc_info:
            SettingsService(db).save_group("general", {"max_seats_per_booking": 99})
        title, _, detail = str(exc_info.value).partition(": ")
        assert title == "Invalid Settings"
        assert detail.startswith("max_seats_per_booking: ")
