from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..core.enums import ApprovalStatus, DayStatus, Punctuality
from ..common.validators import optional_text
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Location:
    """Where a check-in/check-out happened. Stored as given, never validated."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Location"]:
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ValidationError("Location must be an object")
        if not data:
            return None
        lat = data.get("latitude")
        lng = data.get("longitude")
        try:
            return cls(
                latitude=float(lat) if lat is not None else None,
                longitude=float(lng) if lng is not None else None,
                address=optional_text(data.get("address"), "Location address"),
            )
        except (TypeError, ValueError):
            raise ValidationError("Location coordinates must be numbers")

    def merged(self, other: Optional["Location"]) -> "Location":
        if other is None:
            return self
        return Location(
            latitude=other.latitude if other.latitude is not None else self.latitude,
            longitude=other.longitude if other.longitude is not None else self.longitude,
            address=other.address or self.address,
        )

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude, "address": self.address}


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per student per day.

    `hours_worked` and `day_status` are derived values; services recompute them
    with `time_policy.apply_derived_fields` before every write.
    """

    attendance_id: Optional[int]
    student_id: int
    placement_id: int
    work_date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    hours_worked: Optional[Decimal] = None
    punctuality: Optional[Punctuality] = None
    day_status: DayStatus = DayStatus.INCOMPLETE
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    absence_reason: Optional[str] = None
    location: Optional[Location] = None
    notes: Optional[str] = None
    supervisor_comment: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    acknowledged_by: Optional[int] = None
    acknowledged_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.check_out_time is not None:
            if self.check_in_time is None:
                raise ValidationError("Check-out requires a check-in")
            if self.check_out_time <= self.check_in_time:
                raise ValidationError("Check-out time must be after check-in time")

    def to_dict(self) -> dict[str, Any]:
        def _iso(value):
            return value.isoformat() if value is not None else None

        return {
            "attendance_id": self.attendance_id,
            "student_id": self.student_id,
            "placement_id": self.placement_id,
            "date": self.work_date.isoformat(),
            "check_in_time": _iso(self.check_in_time),
            "check_out_time": _iso(self.check_out_time),
            "hours_worked": float(self.hours_worked) if self.hours_worked is not None else None,
            "punctuality": self.punctuality.value if self.punctuality else None,
            "day_status": self.day_status.value,
            "approval_status": self.approval_status.value,
            "absence_reason": self.absence_reason,
            "location": self.location.to_dict() if self.location else None,
            "notes": self.notes,
            "supervisor_comment": self.supervisor_comment,
            "reviewed_by": self.reviewed_by,
            "reviewed_at": _iso(self.reviewed_at),
            "acknowledged_by": self.acknowledged_by,
            "acknowledged_at": _iso(self.acknowledged_at),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class RecordFilters:
    """Query filters shared by history and placement listings."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    day_status: Optional[DayStatus] = None
    approval_status: Optional[ApprovalStatus] = None
