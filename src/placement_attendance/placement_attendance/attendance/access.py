from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..directory.repository import StudentDirectory


@dataclass(frozen=True)
class Viewer:
    """The signed-in user as issued by the auth layer."""

    user_id: int
    role: Role
    student_id: Optional[int] = None
    supervisor_id: Optional[int] = None
    department_id: Optional[int] = None


class AccessPolicy:
    """Who may read a student's attendance."""

    def __init__(self, directory: StudentDirectory):
        self._directory = directory

    def ensure_can_view_student(self, viewer: Viewer, student_id: int) -> None:
        if viewer.role == Role.STUDENT:
            if viewer.student_id is None or int(viewer.student_id) != int(student_id):
                raise AuthorizationError("You can only view your own attendance")
            return

        if viewer.role == Role.COORDINATOR and viewer.department_id is not None:
            student = self._directory.get_student(int(student_id))
            if not student or student.department_id != viewer.department_id:
                raise AuthorizationError("You can only view students in your department")
