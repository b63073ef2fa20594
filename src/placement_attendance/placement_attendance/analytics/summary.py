from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..attendance.access import AccessPolicy, Viewer
from ..attendance.repository import AttendanceRepository
from ..core.constants import DEFAULT_STREAK_WINDOW
from ..core.enums import PRESENT_DAY_STATUSES, ApprovalStatus, DayStatus
from ..directory.repository import StudentDirectory
from .anomalies import AnomalyAnalyzer, AnomalyFinding, percent


@dataclass(frozen=True)
class AttendanceSummary:
    student_id: int
    total: int
    day_status_counts: dict[DayStatus, int]
    approval_status_counts: dict[ApprovalStatus, int]
    completion_percentage: int
    punctuality_rate: int
    anomalies: list[AnomalyFinding] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "total": self.total,
            "day_status": {s.value: self.day_status_counts.get(s, 0) for s in DayStatus},
            "approval_status": {s.value: self.approval_status_counts.get(s, 0) for s in ApprovalStatus},
            "completion_percentage": self.completion_percentage,
            "punctuality_rate": self.punctuality_rate,
            "anomalies": [a.to_dict() for a in self.anomalies],
        }


@dataclass(frozen=True)
class AttendanceStats:
    student_id: int
    total: int
    present: int
    late: int
    absent: int
    excused: int
    attendance_rate: float
    current_streak: int

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "total": self.total,
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "excused": self.excused,
            "attendance_rate": self.attendance_rate,
            "current_streak": self.current_streak,
        }


class SummaryService:
    """Roll-ups computed on read; nothing here is persisted."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: StudentDirectory,
        *,
        analyzer: Optional[AnomalyAnalyzer] = None,
        access: Optional[AccessPolicy] = None,
    ):
        self._attendance = attendance
        self._analyzer = analyzer or AnomalyAnalyzer()
        self._access = access or AccessPolicy(directory)

    def get_summary(self, student_id: int, viewer: Viewer) -> AttendanceSummary:
        self._access.ensure_can_view_student(viewer, student_id)
        records = self._attendance.list_for_student(int(student_id))

        day_counts = Counter(r.day_status for r in records)
        approval_counts = Counter(r.approval_status for r in records)
        total = len(records)

        on_time = day_counts[DayStatus.PRESENT_ON_TIME]
        late = day_counts[DayStatus.PRESENT_LATE]
        completed = on_time + late + day_counts[DayStatus.HALF_DAY] + day_counts[DayStatus.EXCUSED_ABSENCE]

        return AttendanceSummary(
            student_id=int(student_id),
            total=total,
            day_status_counts=dict(day_counts),
            approval_status_counts=dict(approval_counts),
            completion_percentage=percent(completed, total),
            punctuality_rate=percent(on_time, on_time + late),
            anomalies=self._analyzer.analyze(records),
        )

    def get_stats(self, student_id: int, viewer: Viewer) -> AttendanceStats:
        self._access.ensure_can_view_student(viewer, student_id)
        records = self._attendance.list_for_student(int(student_id))

        counts = Counter(r.day_status for r in records)
        total = len(records)
        present = sum(counts[s] for s in PRESENT_DAY_STATUSES)

        rate = 0.0
        if total:
            rate = float((Decimal(present) * 100 / Decimal(total)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

        streak = 0
        for record in records[:DEFAULT_STREAK_WINDOW]:
            if record.day_status not in PRESENT_DAY_STATUSES:
                break
            streak += 1

        return AttendanceStats(
            student_id=int(student_id),
            total=total,
            present=present,
            late=counts[DayStatus.PRESENT_LATE],
            absent=counts[DayStatus.ABSENT],
            excused=counts[DayStatus.EXCUSED_ABSENCE],
            attendance_rate=rate,
            current_streak=streak,
        )
