"""
Tests for configuration, logging, templates, metrics and datetime helpers
"""
import logging
from datetime import datetime, timedelta, timezone

import pytest

from curtaincall.core.config import Settings
from curtaincall.core.logging_config import SensitiveDataFilter
from curtaincall.core.middleware_metrics import normalize_endpoint
from curtaincall.core.templates import (
    format_money,
    format_performance,
    redirect_with_notice,
    split_message
)
from curtaincall.utils.datetime_utils import (
    end_of_day,
    ensure_utc,
    parse_iso,
    parse_optional_date,
    start_of_day,
    to_iso_z
)
from curtaincall.utils.ids import new_id, sequential_id


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CURTAINCALL_MAX_SEATS_PER_BOOKING", raising=False)
        settings = Settings(_env_file=None)
        assert settings.app_name == "CurtainCall"
        assert settings.max_seats_per_booking == 5
        assert settings.ticket_price == 50.0
        assert settings.demo_user_id == "user1"

    def test_env_prefix_and_currency(self, monkeypatch):
        monkeypatch.setenv("CURTAINCALL_CURRENCY", "eur")
        monkeypatch.setenv("CURTAINCALL_ALLOWED_ORIGINS", "http://a.test, http://b.test,")
        settings = Settings(_env_file=None)
        assert settings.currency == "EUR"
        assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]


class TestSensitiveDataFilter:
    def _filtered(self, message, args=None, enabled=True):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, message, args, None)
        SensitiveDataFilter(enabled=enabled).filter(record)
        return record.getMessage()

    def test_masks_passwords_and_codes(self):
        assert self._filtered("login password=hunter2") == "login password=***"
        assert self._filtered('{"otp": "123456"}') == '{"otp=***"}'

    def test_masks_card_numbers(self):
        assert self._filtered("card 4242 4242 4242 4242") == "card 4242 **** **** 4242"

    def test_masks_args(self):
        assert self._filtered("payload %s", ("password=secret",)) == "payload password=***"

    def test_disabled(self):
        assert self._filtered("password=hunter2", enabled=False) == "password=hunter2"


class TestTemplateHelpers:
    def test_split_message(self):
        assert split_message("Invalid Code: the discount code entered is not valid.") == (
            "Invalid Code", "the discount code entered is not valid."
        )
        assert split_message("Seats already taken", "Booking Failed") == ("Booking Failed", "Seats already taken")

    def test_redirect_with_notice(self):
        response = redirect_with_notice("/admin/shows?new=1", "Missing Fields", "Fill them in.", "destructive")
        assert response.status_code == 303
        assert response.headers["location"] == (
            "/admin/shows?new=1&notice=Missing+Fields&variant=destructive&detail=Fill+them+in."
        )

    def test_formatters(self):
        assert format_money(1234.5, "USD") == "$1,234.50"
        assert format_money(10, "EUR") == "EUR 10.00"
        performance = datetime(2026, 11, 6, 19, 30, tzinfo=timezone.utc)
        assert format_performance(performance) == "Friday, Nov 06, 2026 - 07:30 PM"


class TestNormalizeEndpoint:
    @pytest.mark.parametrize("path,expected", [
        ("/api/shows/show_001", "/api/shows/{id}"),
        ("/api/admin/bookings/bk_4f0c2a9d1b3e/cancel", "/api/admin/bookings/{id}/cancel"),
        ("/admin/users/user12/status", "/admin/users/{id}/status"),
        ("/api/shows/genres", "/api/shows/genres"),
        ("/shows", "/shows"),
    ])
    def test_ids_are_collapsed(self, path, expected):
        assert normalize_endpoint(path) == expected


class TestDatetimeUtils:
    def test_parse_and_format(self):
        value = parse_iso("2026-11-06T19:30:00Z")
        assert value == datetime(2026, 11, 6, 19, 30, tzinfo=timezone.utc)
        assert to_iso_z(value) == "2026-11-06T19:30:00Z"

    def test_offsets_become_utc(self):
        assert to_iso_z(parse_iso("2026-11-06T21:30:00+02:00")) == "2026-11-06T19:30:00Z"
        assert ensure_utc(datetime(2026, 1, 1)).tzinfo == timezone.utc

    def test_day_bounds(self):
        value = datetime(2026, 3, 4, 15, 0, tzinfo=timezone.utc)
        assert start_of_day(value) == datetime(2026, 3, 4, tzinfo=timezone.utc)
        assert end_of_day(value) - start_of_day(value) < timedelta(days=1)

    def test_optional_date(self):
        assert parse_optional_date("") is None
        assert parse_optional_date(None) is None
        assert parse_optional_date("2026-03-04") == datetime(2026, 3, 4, tzinfo=timezone.utc)
        with pytest.raises(ValueError):
            parse_optional_date("04/03/2026")


class TestIds:
    def test_ids(self):
        assert sequential_id("show", 7) == "show_007"
        generated = new_id("bk")
        assert generated.startswith("bk_")
        assert len(generated) == 15
