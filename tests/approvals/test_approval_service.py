from __future__ import annotations

from datetime import date, datetime

import pytest

from src.placement_attendance.placement_attendance.approvals.service import ApprovalService
from src.placement_attendance.placement_attendance.attendance import time_policy
from src.placement_attendance.placement_attendance.attendance.access import Viewer
from src.placement_attendance.placement_attendance.attendance.model import AttendanceRecord
from src.placement_attendance.placement_attendance.core.enums import (
    ApprovalStatus,
    DayStatus,
    NotificationType,
    Punctuality,
    Role,
)
from src.placement_attendance.placement_attendance.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)

REVIEWED_AT = datetime(2026, 2, 3, 9, 0)


@pytest.fixture
def svc(attendance_repo, directory, notifications):
    return ApprovalService(attendance_repo, directory, notifications)


@pytest.fixture
def full_day_id(attendance_repo):
    rec = time_policy.apply_derived_fields(
        AttendanceRecord(
            attendance_id=None,
            student_id=1,
            placement_id=11,
            work_date=date(2026, 2, 2),
            check_in_time=datetime(2026, 2, 2, 8, 0),
            check_out_time=datetime(2026, 2, 2, 16, 0),
            punctuality=Punctuality.ON_TIME,
        )
    )
    return attendance_repo.create(rec)


def test_approve_records_reviewer_and_notifies_student(svc, attendance_repo, notifications, full_day_id):
    rec = svc.approve(full_day_id, 7, "Good work", now=REVIEWED_AT)

    assert rec.approval_status == ApprovalStatus.APPROVED
    assert rec.day_status == DayStatus.PRESENT_ON_TIME
    assert rec.reviewed_by == 7
    assert rec.reviewed_at == REVIEWED_AT
    assert rec.supervisor_comment == "Good work"
    assert attendance_repo.get_by_id(full_day_id) == rec

    (event,) = notifications.events
    assert event.event_type == NotificationType.ATTENDANCE_APPROVED
    assert event.recipient_ids == (101,)


def test_reject_requires_a_reason(svc, full_day_id):
    with pytest.raises(ValidationError):
        svc.reject(full_day_id, 7, "  ")

    rec = svc.reject(full_day_id, 7, "Not on site", now=REVIEWED_AT)
    assert rec.approval_status == ApprovalStatus.REJECTED
    assert rec.supervisor_comment == "Not on site"


def test_reclassify_persists_override_and_flags_review(svc, attendance_repo, notifications, full_day_id):
    rec = svc.reclassify(full_day_id, 8, "half_day", "Left site at noon", now=REVIEWED_AT)

    assert rec.day_status == DayStatus.HALF_DAY
    assert rec.approval_status == ApprovalStatus.NEEDS_REVIEW
    stored = attendance_repo.get_by_id(full_day_id)
    assert stored.day_status == DayStatus.HALF_DAY
    # raw facts untouched
    assert stored.hours_worked == rec.hours_worked
    assert notifications.events[-1].event_type == NotificationType.ATTENDANCE_RECLASSIFIED


def test_reclassify_validates_input(svc, full_day_id):
    with pytest.raises(ValidationError, match="Invalid day status"):
        svc.reclassify(full_day_id, 7, "SICK", "comment")
    with pytest.raises(ValidationError):
        svc.reclassify(full_day_id, 7, "ABSENT", "")


def test_acknowledge_only_stamps_the_record(svc, notifications, full_day_id):
    rec = svc.acknowledge(full_day_id, 7, now=REVIEWED_AT)

    assert rec.acknowledged_by == 7
    assert rec.acknowledged_at == REVIEWED_AT
    assert rec.approval_status == ApprovalStatus.PENDING
    assert notifications.events == []


def test_unassigned_supervisor_is_refused(svc, attendance_repo, full_day_id):
    with pytest.raises(AuthorizationError, match="not assigned"):
        svc.approve(full_day_id, 9)
    assert attendance_repo.get_by_id(full_day_id).approval_status == ApprovalStatus.PENDING


def test_unknown_record(svc):
    with pytest.raises(NotFoundError):
        svc.approve(404, 7)


@pytest.mark.parametrize("comment", [42, {"text": "ok"}, ["ok"]])
def test_comment_must_be_text(svc, attendance_repo, full_day_id, comment):
    with pytest.raises(ValidationError, match="must be a string"):
        svc.approve(full_day_id, 7, comment)
    with pytest.raises(ValidationError, match="must be a string"):
        svc.reject(full_day_id, 7, comment)
    with pytest.raises(ValidationError, match="must be a string"):
        svc.reclassify(full_day_id, 7, "HALF_DAY", comment)
    assert attendance_repo.get_by_id(full_day_id).approval_status == ApprovalStatus.PENDING


def test_reviewer_is_stored_as_supervisor_id(svc, attendance_repo, full_day_id):
    # signed in with a user account only: user 208 is supervisor 8
    supervisor_id = svc.supervisor_id_for(Viewer(user_id=208, role=Role.INDUSTRIAL_SUPERVISOR))

    approved = svc.approve(full_day_id, supervisor_id, now=REVIEWED_AT)
    acknowledged = svc.acknowledge(full_day_id, supervisor_id, now=REVIEWED_AT)

    assert approved.reviewed_by == 8
    assert acknowledged.acknowledged_by == 8
    assert attendance_repo.get_by_id(full_day_id).reviewed_by == 8


def test_review_times_are_stored_to_the_second(svc, full_day_id):
    rec = svc.approve(full_day_id, 7, now=datetime(2026, 2, 3, 9, 0, 0, 654321))

    assert rec.reviewed_at == REVIEWED_AT
    assert svc.acknowledge(full_day_id, 7, now=datetime(2026, 2, 3, 9, 0, 0, 1)).acknowledged_at == REVIEWED_AT
