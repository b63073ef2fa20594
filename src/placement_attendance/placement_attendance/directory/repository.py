from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PlacementRef, StudentProfile, SupervisorProfile


class StudentDirectory(Protocol):
    """Read-only view over students, placements and supervisors.

    Note: always answers from the source of truth; callers must not cache it.
    """

    def get_student(self, student_id: int) -> Optional[StudentProfile]:
        raise NotImplementedError

    def get_placement(self, placement_id: int) -> Optional[PlacementRef]:
        raise NotImplementedError

    def find_supervisor(self, supervisor_id: int) -> Optional[SupervisorProfile]:
        """Look a supervisor up by supervisor (entity) id."""

        raise NotImplementedError

    def find_supervisor_by_user(self, user_id: int) -> Optional[SupervisorProfile]:
        """Look a supervisor up by the id of its user account."""

        raise NotImplementedError

    def list_actively_placed(self) -> Sequence[StudentProfile]:
        """Students with an approved placement."""

        raise NotImplementedError
