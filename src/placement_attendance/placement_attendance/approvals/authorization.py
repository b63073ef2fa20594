"""Supervisor-to-student authorization.

Supervisor/student links are recorded in three places by the placement
modules (placement supervisor fields, student supervisor fields and the
supervisor's assigned-student list) and they are not always in sync. Any one
of them is enough to authorize a supervisor.

Supervisor ids and user ids are separate integer spaces: every check here
takes a supervisor (entity) id, and a signed-in user is mapped to one only
through `supervisor_id_for`.
"""

from __future__ import annotations

from typing import Optional

from ..attendance.access import Viewer
from ..core.exceptions import AuthorizationError
from ..directory.model import PlacementRef, StudentProfile, SupervisorProfile
from ..directory.repository import StudentDirectory


class SupervisorAuthorizer:
    def __init__(self, directory: StudentDirectory):
        self._directory = directory

    def supervisor_id_for(self, viewer: Viewer) -> int:
        """Supervisor id of the signed-in user.

        The session's `supervisor_id` wins; otherwise the user account is
        looked up in the supervisors table by user id.
        """

        if viewer.supervisor_id is not None:
            return int(viewer.supervisor_id)
        supervisor = self._directory.find_supervisor_by_user(int(viewer.user_id))
        if supervisor is None:
            raise AuthorizationError("Supervisor profile not found")
        return supervisor.supervisor_id

    def is_authorized(self, supervisor_id: int, student_id: int, placement_id: Optional[int] = None) -> bool:
        supervisor_id = int(supervisor_id)
        supervisor = self._directory.find_supervisor(supervisor_id)
        placement = self._directory.get_placement(int(placement_id)) if placement_id is not None else None
        student = self._directory.get_student(int(student_id))

        return (
            _placement_match(placement, supervisor_id)
            or _student_match(student, supervisor_id)
            or _assigned_list_match(supervisor, int(student_id))
        )


def _placement_match(placement: Optional[PlacementRef], supervisor_id: int) -> bool:
    if placement is None:
        return False
    return supervisor_id in (placement.departmental_supervisor_id, placement.industrial_supervisor_id)


def _student_match(student: Optional[StudentProfile], supervisor_id: int) -> bool:
    if student is None:
        return False
    return supervisor_id in student.supervisor_ids


def _assigned_list_match(supervisor: Optional[SupervisorProfile], student_id: int) -> bool:
    if supervisor is None:
        return False
    return student_id in supervisor.assigned_student_ids
