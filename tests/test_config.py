# tests/test_config.py
import pytest
from pydantic import ValidationError

from lms_attendance.core.config import Settings
from lms_attendance.services import attendance_summary as summary_module


def test_non_working_weekdays_from_environment(monkeypatch):
    monkeypatch.setenv("NON_WORKING_WEEKDAYS", "[6, 5, 6]")
    monkeypatch.setenv("HOURS_PER_PRESENT_DAY", "6.5")

    settings = Settings(_env_file=None)

    assert settings.NON_WORKING_WEEKDAYS == [5, 6]
    assert settings.HOURS_PER_PRESENT_DAY == 6.5


def test_non_working_weekdays_out_of_range_rejected(monkeypatch):
    monkeypatch.setenv("NON_WORKING_WEEKDAYS", "[7]")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_summary_computer_built_from_settings(monkeypatch):
    monkeypatch.setenv("NON_WORKING_WEEKDAYS", "[5, 6]")
    monkeypatch.setenv("HOURS_PER_PRESENT_DAY", "4")
    settings = Settings(_env_file=None)
    monkeypatch.setattr(summary_module, "get_settings", lambda: settings)

    computer = summary_module.get_summary_computer()

    assert computer.hours_per_present_day == 4.0
    assert computer.non_working_weekdays == frozenset({5, 6})
