from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..approvals.authorization import SupervisorAuthorizer
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_max_length
from ..core.constants import MAX_NOTES_LENGTH
from ..core.enums import ApprovalStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, PreconditionFailedError
from ..directory.repository import StudentDirectory
from . import time_policy
from .access import AccessPolicy, Viewer
from .model import AttendanceRecord, Location, RecordFilters
from .preconditions import require_placed_student
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _append_note(existing: Optional[str], addition: Optional[str]) -> Optional[str]:
    if not addition:
        return existing
    if not existing:
        return addition
    return f"{existing}\n{addition}"


class AttendanceService:
    """Student check-in/check-out plus the read side of the attendance records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: StudentDirectory,
        *,
        access: Optional[AccessPolicy] = None,
        authorizer: Optional[SupervisorAuthorizer] = None,
    ):
        self._attendance = attendance
        self._directory = directory
        self._access = access or AccessPolicy(directory)
        self._authorizer = authorizer or SupervisorAuthorizer(directory)

    def check_in(self, student_id: int, data: Optional[dict] = None, *, now: Optional[datetime] = None) -> AttendanceRecord:
        data = data or {}
        # DATETIME columns keep whole seconds.
        now = (now or now_local()).replace(microsecond=0)
        today = now.date()

        student = require_placed_student(self._directory, student_id, action="check in")

        if self._attendance.get_for_student_and_date(student.student_id, today):
            raise PreconditionFailedError("You have already checked in today")

        notes = require_max_length(optional_text(data.get("notes"), "Notes"), "Notes", MAX_NOTES_LENGTH)
        record = AttendanceRecord(
            attendance_id=None,
            student_id=student.student_id,
            placement_id=int(student.current_placement_id),
            work_date=today,
            check_in_time=now,
            punctuality=time_policy.classify_punctuality(now),
            approval_status=ApprovalStatus.PENDING,
            location=Location.from_dict(data.get("location")),
            notes=notes,
        )
        record = time_policy.apply_derived_fields(record)

        # A concurrent check-in for the same day loses here with ConflictError.
        attendance_id = self._attendance.create(record)
        logger.info(
            "Student %s checked in (attendance_id=%s, punctuality=%s)",
            student.student_id,
            attendance_id,
            record.punctuality.value,
        )
        return replace(record, attendance_id=attendance_id)

    def check_out(self, student_id: int, data: Optional[dict] = None, *, now: Optional[datetime] = None) -> AttendanceRecord:
        data = data or {}
        now = (now or now_local()).replace(microsecond=0)
        today = now.date()

        if not self._directory.get_student(int(student_id)):
            raise NotFoundError("Student not found")

        record = self._attendance.get_for_student_and_date(int(student_id), today)
        if not record or record.check_in_time is None:
            raise PreconditionFailedError("You must check in before checking out")
        if record.check_out_time is not None:
            raise PreconditionFailedError("You have already checked out today")
        if now <= record.check_in_time:
            raise PreconditionFailedError("Check-out time must be after check-in time")

        punctuality = record.punctuality
        if punctuality is None:
            punctuality = time_policy.classify_punctuality(record.check_in_time)
            logger.warning(
                "Backfilled missing punctuality on check-out (attendance_id=%s, punctuality=%s)",
                record.attendance_id,
                punctuality.value,
            )

        location = record.location
        new_location = Location.from_dict(data.get("location"))
        if new_location is not None:
            location = location.merged(new_location) if location else new_location

        notes = _append_note(record.notes, optional_text(data.get("notes"), "Notes"))
        require_max_length(notes, "Notes", MAX_NOTES_LENGTH)

        updated = time_policy.apply_derived_fields(
            replace(record, check_out_time=now, punctuality=punctuality, location=location, notes=notes)
        )
        if not self._attendance.update(updated):
            raise NotFoundError("Attendance record not found")

        logger.info(
            "Student %s checked out (attendance_id=%s, hours=%s, day_status=%s)",
            record.student_id,
            record.attendance_id,
            updated.hours_worked,
            updated.day_status.value,
        )
        return updated

    def get_today(self, student_id: int, *, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        today = today or now_local().date()
        return self._attendance.get_for_student_and_date(int(student_id), today)

    def get_history(
        self,
        student_id: int,
        viewer: Viewer,
        *,
        filters: Optional[RecordFilters] = None,
    ) -> Sequence[AttendanceRecord]:
        self._access.ensure_can_view_student(viewer, student_id)
        return self._attendance.list_for_student(int(student_id), filters=filters)

    def get_placement_records(
        self,
        placement_id: int,
        viewer: Viewer,
        *,
        filters: Optional[RecordFilters] = None,
    ) -> Sequence[AttendanceRecord]:
        placement = self._directory.get_placement(int(placement_id))
        if not placement:
            raise NotFoundError("Placement not found")

        if viewer.role == Role.STUDENT:
            raise AuthorizationError("You can only view your own attendance")

        if viewer.role.is_supervisor:
            supervisor_id = self._authorizer.supervisor_id_for(viewer)
            if not self._authorizer.is_authorized(supervisor_id, placement.student_id, placement.placement_id):
                raise AuthorizationError("You can only view attendance for your assigned students")
        else:
            self._access.ensure_can_view_student(viewer, placement.student_id)

        return self._attendance.list_for_placement(placement.placement_id, filters=filters)
