from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PlacementRef, StudentProfile, SupervisorProfile
from .repository import StudentDirectory

_STUDENT_COLUMNS = """
    student_id, user_id, department_id, has_placement, placement_approved,
    current_placement_id, departmental_supervisor_id, industrial_supervisor_id
"""


def _row_to_student(r: dict) -> StudentProfile:
    return StudentProfile(
        student_id=int(r["student_id"]),
        user_id=r.get("user_id"),
        department_id=r.get("department_id"),
        has_placement=bool(r.get("has_placement")),
        placement_approved=bool(r.get("placement_approved")),
        current_placement_id=r.get("current_placement_id"),
        departmental_supervisor_id=r.get("departmental_supervisor_id"),
        industrial_supervisor_id=r.get("industrial_supervisor_id"),
    )


class MySQLStudentDirectory(StudentDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_student(self, student_id: int) -> Optional[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def get_placement(self, placement_id: int) -> Optional[PlacementRef]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT placement_id, student_id, company_name,
                       departmental_supervisor_id, industrial_supervisor_id
                FROM placements
                WHERE placement_id=%s
                """,
                (int(placement_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return PlacementRef(
                placement_id=int(r["placement_id"]),
                student_id=int(r["student_id"]),
                company_name=r.get("company_name"),
                departmental_supervisor_id=r.get("departmental_supervisor_id"),
                industrial_supervisor_id=r.get("industrial_supervisor_id"),
            )

    def _load_supervisor(self, column: str, value: int) -> Optional[SupervisorProfile]:
        # `column` is one of the two fixed key names below.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT supervisor_id, user_id FROM supervisors WHERE {column}=%s LIMIT 1", (int(value),))
            r = fetchone(cur)
            if not r:
                return None

            supervisor_id = int(r["supervisor_id"])
            cur.execute("SELECT student_id FROM supervisor_students WHERE supervisor_id=%s", (supervisor_id,))
            assigned = frozenset(int(x["student_id"]) for x in fetchall(cur))
            return SupervisorProfile(supervisor_id=supervisor_id, user_id=r.get("user_id"), assigned_student_ids=assigned)

    def find_supervisor(self, supervisor_id: int) -> Optional[SupervisorProfile]:
        return self._load_supervisor("supervisor_id", supervisor_id)

    def find_supervisor_by_user(self, user_id: int) -> Optional[SupervisorProfile]:
        return self._load_supervisor("user_id", user_id)

    def list_actively_placed(self) -> Sequence[StudentProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STUDENT_COLUMNS}
                FROM students
                WHERE has_placement=1 AND placement_approved=1
                ORDER BY student_id ASC
                """
            )
            return [_row_to_student(r) for r in fetchall(cur)]
