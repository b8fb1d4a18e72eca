"""Tests for Settings defaults and startup validation."""

from zoneinfo import ZoneInfo

import pytest

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tablebooking.config import Settings


def _settings(**overrides) -> Settings:
    values = {
        "supabase_url": "https://x.supabase.co",
        "supabase_key": "key",
        "admin_api_key": "secret",
        "reference_timezone": "Asia/Bangkok",
        "default_duration_hours": 2.0,
        "debug": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestDefaults:
    def test_empty_store_not_configured(self):
        s = Settings(_env_file=None, supabase_url="", supabase_key="")
        assert s.store_configured is False

    def test_tz(self):
        assert _settings().tz == ZoneInfo("Asia/Bangkok")

    def test_store_configured(self):
        assert _settings().store_configured is True
        assert _settings(supabase_key="").store_configured is False


class TestValidateStartup:
    def test_clean_config_has_no_warnings(self):
        assert _settings().validate_startup() == []

    def test_unknown_timezone(self):
        with pytest.raises(ValueError, match="REFERENCE_TIMEZONE"):
            _settings(reference_timezone="Mars/Olympus_Mons").validate_startup()

    def test_non_positive_duration(self):
        with pytest.raises(ValueError, match="DEFAULT_DURATION_HOURS"):
            _settings(default_duration_hours=0).validate_startup()

    def test_missing_store_outside_debug(self):
        with pytest.raises(ValueError, match="SUPABASE_URL"):
            _settings(supabase_url="").validate_startup()

    def test_missing_store_in_debug_warns(self):
        warnings = _settings(supabase_url="", debug=True).validate_startup()
        assert any("in-memory" in w for w in warnings)

    def test_missing_admin_key_warns(self):
        warnings = _settings(admin_api_key="").validate_startup()
        assert any("ADMIN_API_KEY" in w for w in warnings)
