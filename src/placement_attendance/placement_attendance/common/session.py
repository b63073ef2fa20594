from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import session

from ..attendance.access import Viewer
from ..core.enums import Role
from .responses import error_response


def _optional_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def current_viewer() -> Optional[Viewer]:
    """Build the viewer from the session written by the auth layer."""

    if "user_id" not in session or "role" not in session:
        return None
    try:
        role = Role(session["role"])
    except ValueError:
        return None
    return Viewer(
        user_id=int(session["user_id"]),
        role=role,
        student_id=_optional_int(session.get("student_id")),
        supervisor_id=_optional_int(session.get("supervisor_id")),
        department_id=_optional_int(session.get("department_id")),
    )


def roles_required(*roles: Role):
    """Require a signed-in user; restrict to `roles` when given."""

    allowed = frozenset(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            viewer = current_viewer()
            if viewer is None:
                return error_response("Authentication required", 401, "UNAUTHENTICATED")
            if allowed and viewer.role not in allowed:
                return error_response("You do not have permission to perform this action", 403, "FORBIDDEN")
            return view(*args, **kwargs)

        return wrapper

    return decorator


login_required = roles_required()
