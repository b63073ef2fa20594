"""Institutional workday rules.

Pure functions only: punctuality, hours worked and the day-status derivation
that every write path runs right before persisting a record.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol

from ..core.constants import GRACE_PERIOD_MINUTES, MIN_REQUIRED_HOURS, WORK_END, WORK_START
from ..core.enums import ApprovalStatus, DayStatus, Punctuality
from .model import AttendanceRecord

_TWO_PLACES = Decimal("0.01")
_SECONDS_PER_HOUR = Decimal(3600)


class _DayFacts(Protocol):
    absence_reason: Optional[str]
    approval_status: ApprovalStatus
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    punctuality: Optional[Punctuality]


def punctuality_cutoff(check_in: datetime) -> datetime:
    start = check_in.replace(hour=WORK_START.hour, minute=WORK_START.minute, second=0, microsecond=0)
    return start + timedelta(minutes=GRACE_PERIOD_MINUTES)


def classify_punctuality(check_in: datetime) -> Punctuality:
    """ON_TIME when the check-in is not later than work start + grace period, same day."""
    if check_in <= punctuality_cutoff(check_in):
        return Punctuality.ON_TIME
    return Punctuality.LATE


def hours_worked(check_in: Optional[datetime], check_out: Optional[datetime]) -> Decimal:
    if check_in is None or check_out is None:
        return Decimal("0")
    seconds = Decimal(str((check_out - check_in).total_seconds()))
    return (seconds / _SECONDS_PER_HOUR).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def derive_day_status(record: _DayFacts) -> DayStatus:
    # Order matters: an approved excuse beats everything, and an unfinished day
    # must never be classified by the hours threshold.
    if record.absence_reason and record.approval_status == ApprovalStatus.APPROVED:
        return DayStatus.EXCUSED_ABSENCE
    if record.check_in_time is None:
        return DayStatus.ABSENT
    if record.check_out_time is None:
        return DayStatus.INCOMPLETE
    if hours_worked(record.check_in_time, record.check_out_time) < MIN_REQUIRED_HOURS:
        return DayStatus.HALF_DAY
    if record.punctuality == Punctuality.ON_TIME:
        return DayStatus.PRESENT_ON_TIME
    return DayStatus.PRESENT_LATE


def apply_derived_fields(record: AttendanceRecord) -> AttendanceRecord:
    """Recompute `hours_worked` and `day_status` from the primitive fields."""
    worked = None
    if record.check_in_time is not None and record.check_out_time is not None:
        worked = hours_worked(record.check_in_time, record.check_out_time)
    return replace(record, hours_worked=worked, day_status=derive_day_status(record))


def workday_policy() -> dict:
    return {
        "work_start": WORK_START.strftime("%H:%M"),
        "work_end": WORK_END.strftime("%H:%M"),
        "grace_period_minutes": GRACE_PERIOD_MINUTES,
        "min_required_hours": float(MIN_REQUIRED_HOURS),
    }
