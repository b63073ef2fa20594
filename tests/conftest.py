from __future__ import annotations

from datetime import datetime

import pytest

from tests.fakes import InMemoryAttendance, RecordingNotifications, default_directory


@pytest.fixture
def fixed_now() -> datetime:
    # Monday 2026-02-02, inside the 08:00 + 15 min grace window
    return datetime(2026, 2, 2, 8, 10)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def directory():
    return default_directory()


@pytest.fixture
def notifications() -> RecordingNotifications:
    return RecordingNotifications()
