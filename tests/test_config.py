"""Tests for easy_scheduler.config — Settings parsing."""

import pytest
from pydantic import ValidationError

from easy_scheduler.config import Settings, settings


def test_module_settings_loaded_from_env():
    assert settings.DATABASE_PATH == ":memory:"
    assert settings.NOTIFICATIONS_ENABLED is True


def test_reminder_intervals_parsed_from_string():
    s = Settings(DEFAULT_REMINDER_INTERVALS="60, 10,10")
    assert s.DEFAULT_REMINDER_INTERVALS == [10, 60]


def test_reminder_intervals_empty_string():
    assert Settings(DEFAULT_REMINDER_INTERVALS="").DEFAULT_REMINDER_INTERVALS == []


def test_negative_reminder_interval_rejected():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_REMINDER_INTERVALS="10,-5")


@pytest.mark.parametrize("raw, expected", [("false", False), ("0", False), ("yes", True), ("TRUE", True)])
def test_notifications_enabled_parsing(raw, expected):
    assert Settings(NOTIFICATIONS_ENABLED=raw).NOTIFICATIONS_ENABLED is expected


def test_log_level_uppercased():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
