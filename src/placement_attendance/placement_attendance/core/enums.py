from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles of the signed-in user, as issued by the external auth layer."""

    ADMIN = "admin"
    COORDINATOR = "coordinator"
    ACADEMIC_SUPERVISOR = "academic_supervisor"
    INDUSTRIAL_SUPERVISOR = "industrial_supervisor"
    DEPT_SUPERVISOR = "dept_supervisor"
    STUDENT = "student"

    @property
    def is_supervisor(self) -> bool:
        return self in SUPERVISOR_ROLES


SUPERVISOR_ROLES = frozenset({Role.ACADEMIC_SUPERVISOR, Role.INDUSTRIAL_SUPERVISOR, Role.DEPT_SUPERVISOR})
STAFF_ROLES = frozenset({Role.ADMIN, Role.COORDINATOR}) | SUPERVISOR_ROLES


class Punctuality(str, Enum):
    """Classification of a single check-in event."""

    ON_TIME = "ON_TIME"
    LATE = "LATE"


class DayStatus(str, Enum):
    """Canonical daily outcome, derived from the raw attendance facts."""

    PRESENT_ON_TIME = "PRESENT_ON_TIME"
    PRESENT_LATE = "PRESENT_LATE"
    HALF_DAY = "HALF_DAY"
    ABSENT = "ABSENT"
    EXCUSED_ABSENCE = "EXCUSED_ABSENCE"
    INCOMPLETE = "INCOMPLETE"


PRESENT_DAY_STATUSES = frozenset({DayStatus.PRESENT_ON_TIME, DayStatus.PRESENT_LATE, DayStatus.HALF_DAY})


class ApprovalStatus(str, Enum):
    """Supervisor-controlled workflow state of a record."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    NEEDS_REVIEW = "NEEDS_REVIEW"


class Severity(str, Enum):
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class AnomalyType(str, Enum):
    FREQUENT_LATENESS = "FREQUENT_LATENESS"
    HIGH_ABSENCE_RATE = "HIGH_ABSENCE_RATE"
    FREQUENT_INCOMPLETE_DAYS = "FREQUENT_INCOMPLETE_DAYS"
    CONSECUTIVE_ABSENCES = "CONSECUTIVE_ABSENCES"


class NotificationType(str, Enum):
    ABSENCE_REQUESTED = "ABSENCE_REQUESTED"
    ATTENDANCE_APPROVED = "ATTENDANCE_APPROVED"
    ATTENDANCE_REJECTED = "ATTENDANCE_REJECTED"
    ATTENDANCE_RECLASSIFIED = "ATTENDANCE_RECLASSIFIED"
    MARKED_ABSENT = "MARKED_ABSENT"
