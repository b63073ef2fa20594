from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..attendance import time_policy
from ..attendance.access import Viewer
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_max_length, require_non_empty
from ..core.constants import MAX_SUPERVISOR_COMMENT_LENGTH
from ..core.enums import ApprovalStatus, DayStatus, NotificationType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..directory.repository import StudentDirectory
from ..notifications.model import NotificationEvent
from ..notifications.sink import LoggingNotificationSink, NotificationSink, safe_emit
from .authorization import SupervisorAuthorizer

logger = logging.getLogger(__name__)


def _parse_day_status(value) -> DayStatus:
    if isinstance(value, DayStatus):
        return value
    try:
        return DayStatus(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError("Invalid day status")


class ApprovalService:
    """Supervisor decisions on attendance records.

    `supervisor_id` is always a supervisor (entity) id, never a user id; it is
    what ends up in `reviewed_by` and `acknowledged_by`.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: StudentDirectory,
        notifications: Optional[NotificationSink] = None,
        *,
        authorizer: Optional[SupervisorAuthorizer] = None,
    ):
        self._attendance = attendance
        self._directory = directory
        self._notifications = notifications or LoggingNotificationSink()
        self._authorizer = authorizer or SupervisorAuthorizer(directory)

    def supervisor_id_for(self, viewer: Viewer) -> int:
        """Map the signed-in supervisor to the supervisor id every operation below expects."""
        return self._authorizer.supervisor_id_for(viewer)

    def _load_authorized(self, attendance_id: int, supervisor_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        if not self._authorizer.is_authorized(supervisor_id, record.student_id, record.placement_id):
            raise AuthorizationError("You are not assigned to this student")
        return record

    def _save(self, record: AttendanceRecord) -> AttendanceRecord:
        if not self._attendance.update(record):
            raise NotFoundError("Attendance record not found")
        return record

    def approve(
        self,
        attendance_id: int,
        supervisor_id: int,
        comment: str = "",
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        comment = require_max_length(optional_text(comment, "Comment"), "Comment", MAX_SUPERVISOR_COMMENT_LENGTH)
        record = self._load_authorized(attendance_id, supervisor_id)

        updated = replace(
            record,
            approval_status=ApprovalStatus.APPROVED,
            reviewed_by=int(supervisor_id),
            reviewed_at=(now or now_local()).replace(microsecond=0),
            supervisor_comment=comment or record.supervisor_comment,
        )
        if updated.day_status == DayStatus.ABSENT and updated.absence_reason:
            updated = time_policy.apply_derived_fields(updated)

        self._save(updated)
        logger.info(
            "Supervisor %s approved attendance %s (day_status=%s)",
            supervisor_id,
            record.attendance_id,
            updated.day_status.value,
        )
        self._notify_student(updated, NotificationType.ATTENDANCE_APPROVED, "Attendance approved")
        return updated

    def reject(
        self,
        attendance_id: int,
        supervisor_id: int,
        comment: str,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        comment = require_non_empty(comment, "Rejection reason")
        require_max_length(comment, "Rejection reason", MAX_SUPERVISOR_COMMENT_LENGTH)
        record = self._load_authorized(attendance_id, supervisor_id)

        updated = self._save(
            replace(
                record,
                approval_status=ApprovalStatus.REJECTED,
                reviewed_by=int(supervisor_id),
                reviewed_at=(now or now_local()).replace(microsecond=0),
                supervisor_comment=comment,
            )
        )
        logger.info("Supervisor %s rejected attendance %s", supervisor_id, record.attendance_id)
        self._notify_student(updated, NotificationType.ATTENDANCE_REJECTED, "Attendance rejected")
        return updated

    def reclassify(
        self,
        attendance_id: int,
        supervisor_id: int,
        new_day_status,
        comment: str,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        day_status = _parse_day_status(new_day_status)
        comment = require_non_empty(comment, "Comment")
        require_max_length(comment, "Comment", MAX_SUPERVISOR_COMMENT_LENGTH)
        record = self._load_authorized(attendance_id, supervisor_id)

        # Supervisor override: persisted as-is and flagged for review.
        updated = self._save(
            replace(
                record,
                day_status=day_status,
                approval_status=ApprovalStatus.NEEDS_REVIEW,
                reviewed_by=int(supervisor_id),
                reviewed_at=(now or now_local()).replace(microsecond=0),
                supervisor_comment=comment,
            )
        )
        logger.info(
            "Supervisor %s reclassified attendance %s: %s -> %s",
            supervisor_id,
            record.attendance_id,
            record.day_status.value,
            day_status.value,
        )
        self._notify_student(
            updated,
            NotificationType.ATTENDANCE_RECLASSIFIED,
            f"Attendance reclassified to {day_status.value}",
        )
        return updated

    def acknowledge(self, attendance_id: int, supervisor_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        record = self._load_authorized(attendance_id, supervisor_id)
        acknowledged_at = (now or now_local()).replace(microsecond=0)
        return self._save(replace(record, acknowledged_by=int(supervisor_id), acknowledged_at=acknowledged_at))

    def _notify_student(self, record: AttendanceRecord, event_type: NotificationType, title: str) -> None:
        try:
            student = self._directory.get_student(record.student_id)
        except Exception:
            logger.exception("Could not resolve student to notify (attendance_id=%s)", record.attendance_id)
            return
        if not student or student.user_id is None:
            return

        message = f"{title} for {record.work_date.isoformat()}"
        if record.supervisor_comment:
            message += f": {record.supervisor_comment}"
        safe_emit(
            self._notifications,
            NotificationEvent(
                event_type=event_type,
                recipient_ids=(int(student.user_id),),
                title=title,
                message=message,
                student_id=record.student_id,
                attendance_id=record.attendance_id,
            ),
        )
