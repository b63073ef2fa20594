from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.placement_attendance.placement_attendance.analytics.summary import SummaryService
from src.placement_attendance.placement_attendance.attendance.access import Viewer
from src.placement_attendance.placement_attendance.attendance.model import AttendanceRecord
from src.placement_attendance.placement_attendance.core.enums import ApprovalStatus, DayStatus, Role
from src.placement_attendance.placement_attendance.core.exceptions import AuthorizationError

from tests.fakes import InMemoryAttendance

ADMIN = Viewer(user_id=1, role=Role.ADMIN)


def seeded(*statuses: DayStatus) -> InMemoryAttendance:
    start = date(2026, 1, 5)
    return InMemoryAttendance(
        AttendanceRecord(
            attendance_id=None,
            student_id=1,
            placement_id=11,
            work_date=start + timedelta(days=i),
            day_status=status,
            approval_status=ApprovalStatus.APPROVED if i % 2 else ApprovalStatus.PENDING,
        )
        for i, status in enumerate(statuses)
    )


def test_summary_counts_and_rates(directory):
    repo = seeded(
        DayStatus.PRESENT_ON_TIME,
        DayStatus.PRESENT_ON_TIME,
        DayStatus.PRESENT_LATE,
        DayStatus.HALF_DAY,
        DayStatus.EXCUSED_ABSENCE,
        DayStatus.ABSENT,
        DayStatus.INCOMPLETE,
        DayStatus.PRESENT_ON_TIME,
    )
    summary = SummaryService(repo, directory).get_summary(1, ADMIN).to_dict()

    assert summary["total"] == 8
    assert summary["day_status"]["PRESENT_ON_TIME"] == 3
    assert summary["day_status"]["ABSENT"] == 1
    assert summary["approval_status"] == {"PENDING": 4, "APPROVED": 4, "REJECTED": 0, "NEEDS_REVIEW": 0}
    # on-time 3 + late 1 + half 1 + excused 1 = 6 of 8
    assert summary["completion_percentage"] == 75
    assert summary["punctuality_rate"] == 75
    assert summary["anomalies"] == []


def test_summary_of_empty_history(directory):
    summary = SummaryService(InMemoryAttendance(), directory).get_summary(1, ADMIN)

    assert summary.total == 0
    assert summary.completion_percentage == 0
    assert summary.punctuality_rate == 0
    assert summary.anomalies == []


def test_stats_streak_counts_recent_present_days(directory):
    repo = seeded(
        DayStatus.PRESENT_ON_TIME,
        DayStatus.ABSENT,
        DayStatus.PRESENT_LATE,
        DayStatus.HALF_DAY,
        DayStatus.PRESENT_ON_TIME,
    )
    stats = SummaryService(repo, directory).get_stats(1, ADMIN)

    assert stats.total == 5
    assert stats.present == 4
    assert stats.late == 1
    assert stats.absent == 1
    assert stats.excused == 0
    assert stats.attendance_rate == 80.0
    assert stats.current_streak == 3


def test_stats_rate_has_two_decimals(directory):
    repo = seeded(DayStatus.PRESENT_ON_TIME, DayStatus.ABSENT, DayStatus.ABSENT)
    assert SummaryService(repo, directory).get_stats(1, ADMIN).attendance_rate == pytest.approx(33.33)


def test_student_reads_only_own_summary(directory):
    svc = SummaryService(InMemoryAttendance(), directory)

    svc.get_summary(1, Viewer(user_id=101, role=Role.STUDENT, student_id=1))
    with pytest.raises(AuthorizationError):
        svc.get_summary(1, Viewer(user_id=102, role=Role.STUDENT, student_id=2))
