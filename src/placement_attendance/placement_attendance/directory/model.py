from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class StudentProfile:
    """What the attendance engine needs to know about a student.

    Owned by the placement/user modules; read-only here.
    """

    student_id: int
    user_id: Optional[int] = None
    department_id: Optional[int] = None
    has_placement: bool = False
    placement_approved: bool = False
    current_placement_id: Optional[int] = None
    departmental_supervisor_id: Optional[int] = None
    industrial_supervisor_id: Optional[int] = None

    @property
    def has_active_placement(self) -> bool:
        return self.has_placement and self.current_placement_id is not None

    @property
    def supervisor_ids(self) -> tuple[int, ...]:
        return tuple(
            s for s in (self.departmental_supervisor_id, self.industrial_supervisor_id) if s is not None
        )


@dataclass(frozen=True)
class PlacementRef:
    placement_id: int
    student_id: int
    company_name: Optional[str] = None
    departmental_supervisor_id: Optional[int] = None
    industrial_supervisor_id: Optional[int] = None


@dataclass(frozen=True)
class SupervisorProfile:
    supervisor_id: int
    user_id: Optional[int] = None
    assigned_student_ids: frozenset[int] = field(default_factory=frozenset)
