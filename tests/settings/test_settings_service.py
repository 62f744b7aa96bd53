from __future__ import annotations

from datetime import time

import pytest

from conftest import CallLog, InMemorySettings
from school_attendance.core.exceptions import ValidationError
from school_attendance.settings.service import SettingsService


@pytest.fixture
def repo():
    return InMemorySettings(CallLog())


def test_defaults_when_nothing_is_stored(repo):
    s = SettingsService(repo).get("t1")

    assert (s.school_year, s.default_year_level, s.theme, s.timezone) == ("2024-2025", "Year 7", "light", "UTC")
    assert s.attendance_reminder_time == time(9, 0)
    assert s.email_notifications is True
    assert repo.rows == {}


def test_update_merges_into_current_settings(repo):
    svc = SettingsService(repo)

    svc.update("t1", theme="dark", attendance_reminder_time="07:45")
    s = svc.update("t1", email_notifications="false")

    assert (s.theme, s.attendance_reminder_time, s.email_notifications) == ("dark", time(7, 45), False)
    assert repo.rows["t1"] == s


@pytest.mark.parametrize(
    "changes",
    [
        {"theme": "blue"},
        {"timezone": "Mars/Olympus"},
        {"default_year_level": "Year 1"},
        {"attendance_reminder_time": "9am"},
        {"email_notifications": "maybe"},
        {"user_id": "t2"},
        {"font": "serif"},
    ],
)
def test_update_rejects_invalid_changes(repo, changes):
    with pytest.raises(ValidationError):
        SettingsService(repo).update("t1", **changes)
    assert repo.rows == {}
