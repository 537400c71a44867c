from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .attendance.factory import AttendanceDurationFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import SessionService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.access import AccessControl
from .users.department_repository import DepartmentRepository
from .users.mysql_admin_repository import MySQLAdminRepository
from .users.mysql_department_repository import MySQLDepartmentRepository
from .users.mysql_teacher_repository import MySQLTeacherRepository
from .users.repository import AdminRepository, TeacherRepository
from .users.service import AdminService, AuthService, DepartmentService, TeacherService


@dataclass(frozen=True)
class Container:
    """Everything a request handler may depend on, wired once at startup."""

    admins_repo: AdminRepository
    teachers_repo: TeacherRepository
    departments_repo: DepartmentRepository
    students_repo: StudentRepository
    sessions_repo: SessionRepository
    attendance_repo: AttendanceRepository

    access_control: AccessControl
    auth_service: AuthService
    admin_service: AdminService
    teacher_service: TeacherService
    department_service: DepartmentService
    student_service: StudentService
    session_service: SessionService
    attendance_service: AttendanceService
    report_service: ReportService


def assemble(
    *,
    admins: AdminRepository,
    teachers: TeacherRepository,
    departments: DepartmentRepository,
    students: StudentRepository,
    sessions: SessionRepository,
    attendance: AttendanceRepository,
) -> Container:
    """Wire services on top of any repository implementations."""

    access = AccessControl()
    return Container(
        admins_repo=admins,
        teachers_repo=teachers,
        departments_repo=departments,
        students_repo=students,
        sessions_repo=sessions,
        attendance_repo=attendance,
        access_control=access,
        auth_service=AuthService(admins, teachers),
        admin_service=AdminService(admins),
        teacher_service=TeacherService(teachers, departments, access),
        department_service=DepartmentService(departments),
        student_service=StudentService(students),
        session_service=SessionService(sessions, teachers, students, departments, access),
        attendance_service=AttendanceService(
            attendance,
            sessions,
            access,
            duration_factory=AttendanceDurationFactory(),
        ),
        report_service=ReportService(attendance, sessions, students, teachers),
    )


def build_container(*, db_config: Mapping[str, Any]) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return assemble(
        admins=MySQLAdminRepository(conn),
        teachers=MySQLTeacherRepository(conn),
        departments=MySQLDepartmentRepository(conn),
        students=MySQLStudentRepository(conn),
        sessions=MySQLSessionRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
    )
