from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.session import UserProvider
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService
from .subjects.mysql_enrollment_repository import MySQLEnrollmentRepository
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.service import SubjectService
from .workspace import Services, Workspace


@dataclass(frozen=True)
class WorkspaceFactory:
    services: Services

    def __call__(self, users: UserProvider) -> Workspace:
        return Workspace(self.services, users)


@dataclass(frozen=True)
class Container:
    services: Services
    workspace_factory: WorkspaceFactory

    def workspace(self, users: UserProvider) -> Workspace:
        return self.workspace_factory(users)


def build_services(*, students, subjects, enrollments, attendance, settings) -> Services:
    """Wire services over any repositories implementing the repository protocols."""
    return Services(
        students=StudentService(students),
        subjects=SubjectService(subjects, enrollments, students),
        attendance=AttendanceService(attendance, students, subjects),
        settings=SettingsService(settings),
        reports=ReportService(),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    services = build_services(
        students=MySQLStudentRepository(conn),
        subjects=MySQLSubjectRepository(conn),
        enrollments=MySQLEnrollmentRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        settings=MySQLSettingsRepository(conn),
    )
    return Container(services=services, workspace_factory=WorkspaceFactory(services))
