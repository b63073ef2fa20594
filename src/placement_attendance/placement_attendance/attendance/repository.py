from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceRecord, RecordFilters


class AttendanceRepository(Protocol):
    """Persistence for attendance records.

    Implementations must enforce one record per (student_id, work_date) and raise
    `ConflictError` when an insert violates it.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_student_and_date(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> int:
        """Insert a new record and return its attendance_id."""

        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        """Persist every mutable field of an existing record."""

        raise NotImplementedError

    def list_for_student(
        self,
        student_id: int,
        *,
        filters: Optional[RecordFilters] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records newest first."""

        raise NotImplementedError

    def list_for_placement(
        self,
        placement_id: int,
        *,
        filters: Optional[RecordFilters] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def student_ids_with_record_on(self, work_date: date, student_ids: Iterable[int]) -> set[int]:
        raise NotImplementedError
