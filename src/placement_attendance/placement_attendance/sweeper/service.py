from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ..attendance import time_policy
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import yesterday
from ..core.enums import ApprovalStatus, NotificationType
from ..core.exceptions import ConflictError
from ..directory.model import StudentProfile
from ..directory.repository import StudentDirectory
from ..notifications.model import NotificationEvent
from ..notifications.sink import LoggingNotificationSink, NotificationSink, safe_emit

logger = logging.getLogger(__name__)


class AbsenceSweeper:
    """Batch job: every placed student without a record on a day is marked ABSENT.

    Safe to re-run for the same date. Not transactional: a student who checks in
    while the sweep is running keeps their own record and the sweep insert for
    them fails on the store's uniqueness constraint.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: StudentDirectory,
        notifications: Optional[NotificationSink] = None,
    ):
        self._attendance = attendance
        self._directory = directory
        self._notifications = notifications or LoggingNotificationSink()

    def mark_absent_for_date(self, target: Optional[date] = None, *, today: Optional[date] = None) -> list[AttendanceRecord]:
        target = target or yesterday(today)

        students = list(self._directory.list_actively_placed())
        if not students:
            logger.info("Absence sweep for %s: no actively placed students", target.isoformat())
            return []

        already_recorded = self._attendance.student_ids_with_record_on(target, [s.student_id for s in students])

        created: list[AttendanceRecord] = []
        skipped = 0
        for student in students:
            if student.student_id in already_recorded:
                continue
            if student.current_placement_id is None:
                logger.warning("Absence sweep: student %s has no current placement, skipped", student.student_id)
                continue

            record = self._insert_absence(student, target)
            if record is None:
                skipped += 1
                continue
            created.append(record)
            self._notify(student, record)

        logger.info(
            "Absence sweep for %s: %d marked absent, %d already recorded, %d lost to concurrent writes",
            target.isoformat(),
            len(created),
            len(already_recorded),
            skipped,
        )
        return created

    def _insert_absence(self, student: StudentProfile, target: date) -> Optional[AttendanceRecord]:
        record = time_policy.apply_derived_fields(
            AttendanceRecord(
                attendance_id=None,
                student_id=student.student_id,
                placement_id=int(student.current_placement_id),
                work_date=target,
                approval_status=ApprovalStatus.PENDING,
            )
        )
        try:
            attendance_id = self._attendance.create(record)
        except ConflictError:
            logger.info("Absence sweep: student %s got a record for %s first", student.student_id, target.isoformat())
            return None
        return replace(record, attendance_id=attendance_id)

    def _notify(self, student: StudentProfile, record: AttendanceRecord) -> None:
        if student.user_id is None:
            return
        safe_emit(
            self._notifications,
            NotificationEvent(
                event_type=NotificationType.MARKED_ABSENT,
                recipient_ids=(int(student.user_id),),
                title="Marked absent",
                message=f"No attendance was recorded for {record.work_date.isoformat()}; you have been marked absent.",
                student_id=record.student_id,
                attendance_id=record.attendance_id,
            ),
        )
