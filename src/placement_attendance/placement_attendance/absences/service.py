from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ..attendance import time_policy
from ..attendance.model import AttendanceRecord
from ..attendance.preconditions import require_placed_student
from ..attendance.repository import AttendanceRepository
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import MAX_ABSENCE_REASON_LENGTH
from ..core.enums import ApprovalStatus, NotificationType
from ..core.exceptions import NotFoundError, PreconditionFailedError
from ..directory.model import StudentProfile
from ..directory.repository import StudentDirectory
from ..notifications.model import NotificationEvent
from ..notifications.sink import LoggingNotificationSink, NotificationSink, safe_emit

logger = logging.getLogger(__name__)


class AbsenceService:
    """Use case: a student asks to be excused for a day."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: StudentDirectory,
        notifications: Optional[NotificationSink] = None,
    ):
        self._attendance = attendance
        self._directory = directory
        self._notifications = notifications or LoggingNotificationSink()

    def submit_absence_request(self, student_id: int, work_date: date, reason: str) -> AttendanceRecord:
        reason = require_non_empty(reason, "Reason")
        require_max_length(reason, "Reason", MAX_ABSENCE_REASON_LENGTH)

        student = require_placed_student(self._directory, student_id, action="submit absence requests")

        existing = self._attendance.get_for_student_and_date(student.student_id, work_date)
        if existing and existing.approval_status == ApprovalStatus.APPROVED:
            raise PreconditionFailedError("Cannot request absence for an already approved attendance")
        if existing and existing.check_in_time is not None:
            raise PreconditionFailedError("Cannot request absence for a day you already checked in")

        if existing:
            record = time_policy.apply_derived_fields(
                replace(existing, absence_reason=reason, approval_status=ApprovalStatus.PENDING)
            )
            if not self._attendance.update(record):
                raise NotFoundError("Attendance record not found")
        else:
            record = time_policy.apply_derived_fields(
                AttendanceRecord(
                    attendance_id=None,
                    student_id=student.student_id,
                    placement_id=int(student.current_placement_id),
                    work_date=work_date,
                    absence_reason=reason,
                    approval_status=ApprovalStatus.PENDING,
                )
            )
            record = replace(record, attendance_id=self._attendance.create(record))

        logger.info(
            "Absence request for student %s on %s (attendance_id=%s)",
            student.student_id,
            work_date.isoformat(),
            record.attendance_id,
        )
        self._notify_supervisors(student, record)
        return record

    def _notify_supervisors(self, student: StudentProfile, record: AttendanceRecord) -> None:
        recipients = []
        try:
            for supervisor_id in student.supervisor_ids:
                supervisor = self._directory.find_supervisor(supervisor_id)
                if supervisor and supervisor.user_id is not None:
                    recipients.append(int(supervisor.user_id))
        except Exception:
            logger.exception("Could not resolve supervisors to notify (attendance_id=%s)", record.attendance_id)
            return

        safe_emit(
            self._notifications,
            NotificationEvent(
                event_type=NotificationType.ABSENCE_REQUESTED,
                recipient_ids=tuple(dict.fromkeys(recipients)),
                title="Absence request submitted",
                message=f"Absence requested for {record.work_date.isoformat()}: {record.absence_reason}",
                student_id=record.student_id,
                attendance_id=record.attendance_id,
            ),
        )
