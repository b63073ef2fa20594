import pytest

from src.placement_attendance.placement_attendance.approvals.authorization import SupervisorAuthorizer
from src.placement_attendance.placement_attendance.attendance.access import Viewer
from src.placement_attendance.placement_attendance.core.enums import Role
from src.placement_attendance.placement_attendance.core.exceptions import AuthorizationError
from src.placement_attendance.placement_attendance.directory.model import PlacementRef, SupervisorProfile

from tests.fakes import InMemoryDirectory, default_directory, placed_student


def test_placement_supervisor_is_authorized():
    directory = InMemoryDirectory(
        students={1: placed_student(1, departmental_supervisor_id=None, industrial_supervisor_id=None)},
        placements={11: PlacementRef(placement_id=11, student_id=1, industrial_supervisor_id=8)},
    )
    auth = SupervisorAuthorizer(directory)

    assert auth.is_authorized(8, 1, 11)
    assert not auth.is_authorized(8, 1)


def test_student_supervisor_field_is_enough():
    directory = InMemoryDirectory(students={1: placed_student(1, departmental_supervisor_id=7)})

    assert SupervisorAuthorizer(directory).is_authorized(7, 1)


def test_assigned_list_is_enough():
    directory = InMemoryDirectory(
        students={1: placed_student(1, departmental_supervisor_id=None, industrial_supervisor_id=None)},
        supervisors={9: SupervisorProfile(supervisor_id=9, user_id=209, assigned_student_ids=frozenset({1}))},
    )
    auth = SupervisorAuthorizer(directory)

    assert auth.is_authorized(9, 1)
    # a user id is never read as a supervisor id
    assert not auth.is_authorized(209, 1)


def test_unrelated_supervisor_is_refused():
    directory = InMemoryDirectory(
        students={1: placed_student(1)},
        placements={11: PlacementRef(placement_id=11, student_id=1, departmental_supervisor_id=7)},
        supervisors={9: SupervisorProfile(supervisor_id=9, user_id=209)},
    )

    assert not SupervisorAuthorizer(directory).is_authorized(9, 1, 11)


def test_supervisor_id_prefers_session_value():
    auth = SupervisorAuthorizer(default_directory())

    viewer = Viewer(user_id=208, role=Role.INDUSTRIAL_SUPERVISOR, supervisor_id=8)

    assert auth.supervisor_id_for(viewer) == 8


def test_supervisor_id_resolved_from_user_account():
    auth = SupervisorAuthorizer(default_directory())

    assert auth.supervisor_id_for(Viewer(user_id=207, role=Role.ACADEMIC_SUPERVISOR)) == 7


def test_user_id_matching_another_supervisor_id_is_not_borrowed():
    directory = default_directory()
    # user 7 owns supervisor 3; supervisor 7 (user 207) supervises student 1
    directory.supervisors[3] = SupervisorProfile(supervisor_id=3, user_id=7)
    auth = SupervisorAuthorizer(directory)

    supervisor_id = auth.supervisor_id_for(Viewer(user_id=7, role=Role.INDUSTRIAL_SUPERVISOR))

    assert supervisor_id == 3
    assert not auth.is_authorized(supervisor_id, 1, 11)


def test_user_without_supervisor_profile_is_refused():
    auth = SupervisorAuthorizer(default_directory())

    with pytest.raises(AuthorizationError, match="Supervisor profile not found"):
        auth.supervisor_id_for(Viewer(user_id=7, role=Role.INDUSTRIAL_SUPERVISOR))
