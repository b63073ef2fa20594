from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.service import AbsenceService
from .analytics.anomalies import AnomalyAnalyzer
from .analytics.summary import SummaryService
from .approvals.authorization import SupervisorAuthorizer
from .approvals.service import ApprovalService
from .attendance.access import AccessPolicy
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .directory.mysql_student_directory import MySQLStudentDirectory
from .directory.repository import StudentDirectory
from .notifications.mysql_notification_sink import MySQLNotificationSink
from .notifications.sink import NotificationSink
from .sweeper.service import AbsenceSweeper


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: AttendanceRepository
    directory: StudentDirectory
    notifications: NotificationSink

    attendance_service: AttendanceService
    absence_service: AbsenceService
    approval_service: ApprovalService
    summary_service: SummaryService
    absence_sweeper: AbsenceSweeper


def wire_container(
    *,
    attendance_repo: AttendanceRepository,
    directory: StudentDirectory,
    notifications: NotificationSink,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    authorizer = SupervisorAuthorizer(directory)
    access = AccessPolicy(directory)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        directory=directory,
        notifications=notifications,
        attendance_service=AttendanceService(attendance_repo, directory, access=access, authorizer=authorizer),
        absence_service=AbsenceService(attendance_repo, directory, notifications),
        approval_service=ApprovalService(attendance_repo, directory, notifications, authorizer=authorizer),
        summary_service=SummaryService(attendance_repo, directory, analyzer=AnomalyAnalyzer(), access=access),
        absence_sweeper=AbsenceSweeper(attendance_repo, directory, notifications),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        attendance_repo=MySQLAttendanceRepository(conn),
        directory=MySQLStudentDirectory(conn),
        notifications=MySQLNotificationSink(conn),
    )
