from __future__ import annotations

from ..core.exceptions import NotFoundError, PreconditionFailedError
from ..directory.model import StudentProfile
from ..directory.repository import StudentDirectory


def require_placed_student(directory: StudentDirectory, student_id: int, *, action: str) -> StudentProfile:
    """Resolve a student who may record attendance: approved and active placement."""

    student = directory.get_student(int(student_id))
    if not student:
        raise NotFoundError("Student not found")
    if not student.has_placement or not student.placement_approved:
        raise PreconditionFailedError(f"You must have an approved placement to {action}")
    if student.current_placement_id is None:
        raise PreconditionFailedError("No active placement found")
    return student
