from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from src.placement_attendance.placement_attendance.attendance.access import Viewer
from src.placement_attendance.placement_attendance.attendance.model import AttendanceRecord, RecordFilters
from src.placement_attendance.placement_attendance.attendance.service import AttendanceService
from src.placement_attendance.placement_attendance.core.enums import DayStatus, Punctuality, Role
from src.placement_attendance.placement_attendance.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from src.placement_attendance.placement_attendance.directory.model import SupervisorProfile

from tests.fakes import RacingAttendance, placed_student


@pytest.fixture
def svc(attendance_repo, directory):
    return AttendanceService(attendance_repo, directory)


def test_check_in_within_grace_is_on_time(svc, attendance_repo, fixed_now):
    rec = svc.check_in(1, {"location": {"latitude": "6.52", "longitude": 3.37}, "notes": " at gate "}, now=fixed_now)

    assert rec.attendance_id is not None
    assert rec.punctuality == Punctuality.ON_TIME
    assert rec.day_status == DayStatus.INCOMPLETE
    assert rec.placement_id == 11
    assert rec.location.latitude == pytest.approx(6.52)
    assert rec.notes == "at gate"
    assert attendance_repo.get_for_student_and_date(1, fixed_now.date()) == rec


def test_second_check_in_same_day_is_rejected(svc, attendance_repo, fixed_now):
    first = svc.check_in(1, now=fixed_now)

    with pytest.raises(PreconditionFailedError, match="already checked in"):
        svc.check_in(1, now=fixed_now + timedelta(hours=1))
    assert attendance_repo.all() == [first]


def test_concurrent_check_in_loses_on_uniqueness(directory, fixed_now):
    racer = AttendanceRecord(attendance_id=None, student_id=1, placement_id=11, work_date=fixed_now.date())
    repo = RacingAttendance(racer)
    svc = AttendanceService(repo, directory)

    with pytest.raises(ConflictError):
        svc.check_in(1, now=fixed_now)
    assert len(repo.all()) == 1


def test_check_in_requires_approved_placement(attendance_repo, directory, fixed_now):
    directory.students[2] = placed_student(2, placement_approved=False)
    directory.students[3] = placed_student(3, current_placement_id=None)
    svc = AttendanceService(attendance_repo, directory)

    with pytest.raises(PreconditionFailedError, match="approved placement"):
        svc.check_in(2, now=fixed_now)
    with pytest.raises(PreconditionFailedError, match="No active placement"):
        svc.check_in(3, now=fixed_now)
    with pytest.raises(NotFoundError):
        svc.check_in(99, now=fixed_now)
    assert attendance_repo.all() == []


def test_bad_location_is_a_validation_error(svc, fixed_now):
    with pytest.raises(ValidationError):
        svc.check_in(1, {"location": {"latitude": "north"}}, now=fixed_now)


@pytest.mark.parametrize(
    "data, message",
    [
        ({"location": "Main office"}, "Location must be an object"),
        ({"location": [6.5, 3.3]}, "Location must be an object"),
        ({"location": {"address": 12}}, "Location address must be a string"),
        ({"notes": 42}, "Notes must be a string"),
    ],
)
def test_wrongly_typed_fields_are_validation_errors(svc, attendance_repo, fixed_now, data, message):
    with pytest.raises(ValidationError, match=message):
        svc.check_in(1, data, now=fixed_now)
    assert attendance_repo.all() == []


def test_check_out_rejects_wrongly_typed_notes(svc, fixed_now):
    svc.check_in(1, now=fixed_now)

    with pytest.raises(ValidationError, match="Notes must be a string"):
        svc.check_out(1, {"notes": ["left early"]}, now=fixed_now + timedelta(hours=8))


def test_late_check_in_stays_late_after_check_out(svc):
    # 08:30 -> 16:00: late arrival, full day
    svc.check_in(1, now=datetime(2026, 2, 2, 8, 30))
    rec = svc.check_out(1, now=datetime(2026, 2, 2, 16, 0))

    assert rec.punctuality == Punctuality.LATE
    assert rec.hours_worked == Decimal("7.50")
    assert rec.day_status == DayStatus.PRESENT_LATE


def test_short_day_is_half_day(svc):
    svc.check_in(1, now=datetime(2026, 2, 2, 8, 0))
    rec = svc.check_out(1, now=datetime(2026, 2, 2, 12, 0))

    assert rec.punctuality == Punctuality.ON_TIME
    assert rec.hours_worked == Decimal("4.00")
    assert rec.day_status == DayStatus.HALF_DAY


def test_check_out_merges_location_and_appends_notes(svc, fixed_now):
    svc.check_in(1, {"location": {"latitude": 1.0, "longitude": 2.0, "address": "Gate A"}, "notes": "in"}, now=fixed_now)
    rec = svc.check_out(
        1,
        {"location": {"latitude": 1.5}, "notes": "out"},
        now=fixed_now + timedelta(hours=8),
    )

    assert rec.location.latitude == 1.5
    assert rec.location.longitude == 2.0
    assert rec.location.address == "Gate A"
    assert rec.notes == "in\nout"
    assert rec.day_status == DayStatus.PRESENT_ON_TIME


def test_check_out_without_check_in(svc, fixed_now):
    with pytest.raises(PreconditionFailedError, match="check in before checking out"):
        svc.check_out(1, now=fixed_now)


def test_double_check_out_is_rejected(svc, fixed_now):
    svc.check_in(1, now=fixed_now)
    svc.check_out(1, now=fixed_now + timedelta(hours=7))

    with pytest.raises(PreconditionFailedError, match="already checked out"):
        svc.check_out(1, now=fixed_now + timedelta(hours=8))


def test_check_out_before_check_in_time_is_rejected(svc, fixed_now):
    svc.check_in(1, now=fixed_now)

    with pytest.raises(PreconditionFailedError, match="after check-in"):
        svc.check_out(1, now=fixed_now)


def test_check_out_backfills_missing_punctuality(attendance_repo, directory, caplog):
    # Legacy row without punctuality; 08:20 is past the 08:15 cutoff.
    attendance_repo.create(
        AttendanceRecord(
            attendance_id=None,
            student_id=1,
            placement_id=11,
            work_date=datetime(2026, 2, 2).date(),
            check_in_time=datetime(2026, 2, 2, 8, 20),
        )
    )
    svc = AttendanceService(attendance_repo, directory)

    with caplog.at_level(logging.WARNING):
        rec = svc.check_out(1, now=datetime(2026, 2, 2, 16, 0))

    assert rec.punctuality == Punctuality.LATE
    assert rec.day_status == DayStatus.PRESENT_LATE
    assert "Backfilled missing punctuality" in caplog.text


def test_get_today_returns_none_before_check_in(svc, fixed_now):
    assert svc.get_today(1, today=fixed_now.date()) is None
    svc.check_in(1, now=fixed_now)
    assert svc.get_today(1, today=fixed_now.date()).check_in_time == fixed_now


def test_history_is_newest_first_and_filtered(svc, fixed_now):
    for offset in range(3):
        day = fixed_now + timedelta(days=offset)
        svc.check_in(1, now=day)
        svc.check_out(1, now=day + timedelta(hours=8))

    student = Viewer(user_id=101, role=Role.STUDENT, student_id=1)
    history = svc.get_history(1, student)
    assert [r.work_date for r in history] == sorted((r.work_date for r in history), reverse=True)

    since = fixed_now.date() + timedelta(days=1)
    assert len(svc.get_history(1, student, filters=RecordFilters(start_date=since))) == 2


def test_student_cannot_read_another_students_history(svc):
    other = Viewer(user_id=102, role=Role.STUDENT, student_id=2)
    with pytest.raises(AuthorizationError):
        svc.get_history(1, other)


def test_coordinator_limited_to_own_department(svc):
    with pytest.raises(AuthorizationError):
        svc.get_history(1, Viewer(user_id=5, role=Role.COORDINATOR, department_id=2))
    assert svc.get_history(1, Viewer(user_id=5, role=Role.COORDINATOR, department_id=1)) == []


def test_placement_records_require_assigned_supervisor(svc, fixed_now):
    svc.check_in(1, now=fixed_now)

    assigned = Viewer(user_id=207, role=Role.ACADEMIC_SUPERVISOR, supervisor_id=7)
    assert len(svc.get_placement_records(11, assigned)) == 1

    # user id only, resolved through the directory
    by_user = Viewer(user_id=208, role=Role.INDUSTRIAL_SUPERVISOR)
    assert len(svc.get_placement_records(11, by_user)) == 1

    stranger = Viewer(user_id=209, role=Role.DEPT_SUPERVISOR, supervisor_id=9)
    with pytest.raises(AuthorizationError):
        svc.get_placement_records(11, stranger)

    with pytest.raises(NotFoundError):
        svc.get_placement_records(404, assigned)


def test_user_id_matching_another_supervisor_id_cannot_read_placement(svc, directory, fixed_now):
    svc.check_in(1, now=fixed_now)
    # user 7 owns supervisor 3, while supervisor 7 is assigned to placement 11
    directory.supervisors[3] = SupervisorProfile(supervisor_id=3, user_id=7)

    with pytest.raises(AuthorizationError):
        svc.get_placement_records(11, Viewer(user_id=7, role=Role.INDUSTRIAL_SUPERVISOR))


def test_times_are_stored_to_the_second(svc, attendance_repo):
    rec = svc.check_in(1, now=datetime(2026, 2, 2, 8, 10, 5, 900000))

    assert rec.check_in_time == datetime(2026, 2, 2, 8, 10, 5)
    assert attendance_repo.get_by_id(rec.attendance_id).check_in_time.microsecond == 0

    # later by a fraction of a second, same stored second
    with pytest.raises(PreconditionFailedError, match="after check-in"):
        svc.check_out(1, now=datetime(2026, 2, 2, 8, 10, 5, 950000))

    out = svc.check_out(1, now=datetime(2026, 2, 2, 16, 10, 5, 123456))
    assert out.check_out_time == datetime(2026, 2, 2, 16, 10, 5)
