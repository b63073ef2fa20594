from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..core.enums import ApprovalStatus, DayStatus, Punctuality
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    dump_json,
    duplicate_key_as_conflict,
    fetchall,
    fetchone,
    in_clause,
    load_json,
)
from .model import AttendanceRecord, Location, RecordFilters
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, student_id, placement_id, work_date, check_in_time, check_out_time,
    hours_worked, punctuality, day_status, approval_status, absence_reason, location_json,
    notes, supervisor_comment, reviewed_by, reviewed_at, acknowledged_by, acknowledged_at,
    created_at, updated_at
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    location = load_json(r.get("location_json"))
    hours = r.get("hours_worked")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        placement_id=int(r["placement_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        hours_worked=Decimal(str(hours)) if hours is not None else None,
        punctuality=Punctuality(r["punctuality"]) if r.get("punctuality") else None,
        day_status=DayStatus(r["day_status"]),
        approval_status=ApprovalStatus(r["approval_status"]),
        absence_reason=r.get("absence_reason"),
        location=Location.from_dict(location),
        notes=r.get("notes"),
        supervisor_comment=r.get("supervisor_comment"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        acknowledged_by=r.get("acknowledged_by"),
        acknowledged_at=r.get("acknowledged_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _filter_clauses(filters: Optional[RecordFilters]) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if not filters:
        return clauses, params

    if filters.start_date is not None:
        clauses.append("work_date >= %s")
        params.append(filters.start_date)
    if filters.end_date is not None:
        clauses.append("work_date <= %s")
        params.append(filters.end_date)
    if filters.day_status is not None:
        clauses.append("day_status = %s")
        params.append(filters.day_status.value)
    if filters.approval_status is not None:
        clauses.append("approval_status = %s")
        params.append(filters.approval_status.value)
    return clauses, params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_student_and_date(self, student_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s AND work_date=%s",
                (int(student_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create(self, record: AttendanceRecord) -> int:
        with duplicate_key_as_conflict("An attendance record already exists for this student and date"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        student_id, placement_id, work_date, check_in_time, check_out_time,
                        hours_worked, punctuality, day_status, approval_status, absence_reason,
                        location_json, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(record.student_id),
                        int(record.placement_id),
                        record.work_date,
                        record.check_in_time,
                        record.check_out_time,
                        record.hours_worked,
                        record.punctuality.value if record.punctuality else None,
                        record.day_status.value,
                        record.approval_status.value,
                        record.absence_reason,
                        dump_json(record.location.to_dict()) if record.location else None,
                        record.notes,
                    ),
                )
                return int(cur.lastrowid)

    def update(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, hours_worked=%s, punctuality=%s,
                    day_status=%s, approval_status=%s, absence_reason=%s, location_json=%s,
                    notes=%s, supervisor_comment=%s, reviewed_by=%s, reviewed_at=%s,
                    acknowledged_by=%s, acknowledged_at=%s
                WHERE attendance_id=%s
                """,
                (
                    record.check_in_time,
                    record.check_out_time,
                    record.hours_worked,
                    record.punctuality.value if record.punctuality else None,
                    record.day_status.value,
                    record.approval_status.value,
                    record.absence_reason,
                    dump_json(record.location.to_dict()) if record.location else None,
                    record.notes,
                    record.supervisor_comment,
                    record.reviewed_by,
                    record.reviewed_at,
                    record.acknowledged_by,
                    record.acknowledged_at,
                    int(record.attendance_id),
                ),
            )
            return cur.rowcount > 0

    def list_for_student(
        self,
        student_id: int,
        *,
        filters: Optional[RecordFilters] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses, params = _filter_clauses(filters)
        clauses.insert(0, "student_id=%s")
        params.insert(0, int(student_id))

        sql = f"SELECT {_COLUMNS} FROM attendance_records WHERE {' AND '.join(clauses)} ORDER BY work_date DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_placement(
        self,
        placement_id: int,
        *,
        filters: Optional[RecordFilters] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses, params = _filter_clauses(filters)
        clauses.insert(0, "placement_id=%s")
        params.insert(0, int(placement_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {' AND '.join(clauses)}
                ORDER BY work_date DESC, student_id ASC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def student_ids_with_record_on(self, work_date: date, student_ids: Iterable[int]) -> set[int]:
        ids = [int(s) for s in student_ids]
        if not ids:
            return set()

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT student_id
                FROM attendance_records
                WHERE work_date=%s AND student_id IN ({in_clause(ids)})
                """,
                (work_date, *ids),
            )
            return {int(r["student_id"]) for r in fetchall(cur)}
