from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from itertools import count
from typing import Any, Mapping, Optional

import pytest
from werkzeug.security import generate_password_hash

from school_attendance import create_app
from school_attendance.attendance.model import AttendanceFilters, AttendanceRecord
from school_attendance.container import assemble
from school_attendance.core.constants import DUPLICATE_ATTENDANCE_MESSAGE
from school_attendance.core.exceptions import DuplicateAttendanceError
from school_attendance.core.enums import Role
from school_attendance.sessions.model import ClassSession
from school_attendance.students.model import Student
from school_attendance.users.department_model import Department
from school_attendance.users.model import Admin, Identity, Teacher


class InMemoryStore:
    """Tables shared by the fake repositories so cascades behave like the schema."""

    def __init__(self):
        self.ids = count(1)
        self.admins: dict[int, Admin] = {}
        self.teachers: dict[int, Teacher] = {}
        self.departments: dict[int, Department] = {}
        self.students: dict[int, Student] = {}
        self.sessions: dict[int, ClassSession] = {}
        self.attendance: dict[int, AttendanceRecord] = {}


class InMemoryAdmins:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        return self._s.admins.get(int(admin_id))

    def get_by_identifier(self, identifier: str) -> Optional[Admin]:
        return next((a for a in self._s.admins.values() if identifier in (a.email, a.mobile)), None)

    def list_all(self):
        return sorted(self._s.admins.values(), key=lambda a: a.name)

    def create(self, *, name, email, mobile, password_hash) -> int:
        admin_id = next(self._s.ids)
        self._s.admins[admin_id] = Admin(admin_id, name, email, mobile, password_hash)
        return admin_id

    def update(self, admin_id: int, changes: Mapping[str, Any]) -> bool:
        self._s.admins[admin_id] = dataclasses.replace(self._s.admins[admin_id], **changes)
        return True

    def delete_by_id(self, admin_id: int) -> bool:
        return self._s.admins.pop(int(admin_id), None) is not None


class InMemoryTeachers:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self._s.teachers.get(int(teacher_id))

    def get_by_identifier(self, identifier: str) -> Optional[Teacher]:
        return next((t for t in self._s.teachers.values() if identifier in (t.email, t.mobile)), None)

    def list_all(self):
        return sorted(self._s.teachers.values(), key=lambda t: t.name)

    def create(self, *, name, email, mobile, password_hash, dept_id) -> int:
        teacher_id = next(self._s.ids)
        self._s.teachers[teacher_id] = Teacher(teacher_id, name, email, mobile, password_hash, dept_id)
        return teacher_id

    def update(self, teacher_id: int, changes: Mapping[str, Any]) -> bool:
        self._s.teachers[teacher_id] = dataclasses.replace(self._s.teachers[teacher_id], **changes)
        return True

    def delete_by_id(self, teacher_id: int) -> bool:
        if self._s.teachers.pop(int(teacher_id), None) is None:
            return False
        for sid in [s.session_id for s in self._s.sessions.values() if s.teacher_id == teacher_id]:
            del self._s.sessions[sid]
        for aid in [a.attendance_id for a in self._s.attendance.values() if a.teacher_id == teacher_id]:
            del self._s.attendance[aid]
        return True


class InMemoryDepartments:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def list_all(self):
        return sorted(self._s.departments.values(), key=lambda d: d.dept_name)

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        return self._s.departments.get(int(dept_id))

    def create(self, *, dept_name: str) -> int:
        dept_id = next(self._s.ids)
        self._s.departments[dept_id] = Department(dept_id, dept_name)
        return dept_id

    def update(self, dept_id: int, *, dept_name: str) -> bool:
        self._s.departments[dept_id] = Department(dept_id, dept_name)
        return True

    def delete_by_id(self, dept_id: int) -> bool:
        return self._s.departments.pop(int(dept_id), None) is not None


class InMemoryStudents:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._s.students.get(int(student_id))

    def list_all(self):
        return sorted(self._s.students.values(), key=lambda s: s.name)

    def create(self, *, name: str, grade: str) -> int:
        student_id = next(self._s.ids)
        self._s.students[student_id] = Student(student_id, name, grade)
        return student_id

    def update(self, student_id: int, changes: Mapping[str, Any]) -> bool:
        self._s.students[student_id] = dataclasses.replace(self._s.students[student_id], **changes)
        return True

    def delete_by_id(self, student_id: int) -> bool:
        for s in list(self._s.sessions.values()):
            if student_id in s.student_ids:
                self._s.sessions[s.session_id] = dataclasses.replace(
                    s, student_ids=tuple(i for i in s.student_ids if i != student_id)
                )
        return self._s.students.pop(int(student_id), None) is not None


class InMemorySessions:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, session_id: int) -> Optional[ClassSession]:
        return self._s.sessions.get(int(session_id))

    def list_all(self):
        return list(self._s.sessions.values())

    def list_by_teacher(self, teacher_id: int):
        return [s for s in self._s.sessions.values() if s.teacher_id == teacher_id]

    def list_for_student(self, student_id: int):
        return [s for s in self._s.sessions.values() if student_id in s.student_ids]

    def create(self, session: ClassSession) -> int:
        session_id = next(self._s.ids)
        self._s.sessions[session_id] = dataclasses.replace(session, session_id=session_id)
        return session_id

    def update(self, session: ClassSession) -> bool:
        self._s.sessions[session.session_id] = session
        return True

    def delete_by_id(self, session_id: int) -> bool:
        if self._s.sessions.pop(int(session_id), None) is None:
            return False
        for a in list(self._s.attendance.values()):
            if a.session_id == session_id:
                self._s.attendance[a.attendance_id] = dataclasses.replace(a, session_id=None)
        return True


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store
        self.create_calls = 0

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._s.attendance.get(int(attendance_id))

    def get_for_session_and_date(self, session_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (a for a in self._s.attendance.values() if a.session_id == session_id and a.work_date == work_date),
            None,
        )

    def list_by_filters(self, filters: AttendanceFilters):
        return [a for a in self._s.attendance.values() if filters.matches(a)]

    def create(self, record: AttendanceRecord) -> int:
        self.create_calls += 1
        # UNIQUE (session_id, work_date), independent of the lookup used by the service.
        key = (record.session_id, record.work_date)
        if any((a.session_id, a.work_date) == key for a in self._s.attendance.values()):
            raise DuplicateAttendanceError(DUPLICATE_ATTENDANCE_MESSAGE)
        attendance_id = next(self._s.ids)
        self._s.attendance[attendance_id] = dataclasses.replace(record, attendance_id=attendance_id)
        return attendance_id

    def update(self, record: AttendanceRecord) -> bool:
        self._s.attendance[record.attendance_id] = record
        return True

    def delete_by_id(self, attendance_id: int) -> bool:
        return self._s.attendance.pop(int(attendance_id), None) is not None


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 2, 8, 30, 0)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def container(store):
    return assemble(
        admins=InMemoryAdmins(store),
        teachers=InMemoryTeachers(store),
        departments=InMemoryDepartments(store),
        students=InMemoryStudents(store),
        sessions=InMemorySessions(store),
        attendance=InMemoryAttendance(store),
    )


@dataclasses.dataclass
class World:
    """Scenario data: admin, two teachers, three students, one session per teacher."""

    admin: Admin
    t1: Teacher
    t2: Teacher
    s1: Student
    s2: Student
    s3: Student
    algebra: ClassSession
    physics: ClassSession

    @property
    def admin_identity(self) -> Identity:
        return Identity(self.admin.admin_id, Role.ADMIN)

    @property
    def t1_identity(self) -> Identity:
        return Identity(self.t1.teacher_id, Role.TEACHER)

    @property
    def t2_identity(self) -> Identity:
        return Identity(self.t2.teacher_id, Role.TEACHER)


@pytest.fixture
def world(container) -> World:
    pw = generate_password_hash("password123")
    admin_id = container.admins_repo.create(name="Root", email="admin@school.edu", mobile="10000001", password_hash=pw)
    t1_id = container.teachers_repo.create(
        name="Sarah Wilson", email="sarah@school.edu", mobile="20000001", password_hash=pw, dept_id=None
    )
    t2_id = container.teachers_repo.create(
        name="James Chen", email="james@school.edu", mobile="20000002", password_hash=pw, dept_id=None
    )
    s1 = container.student_service.create(name="Alex Johnson", grade="10th")
    s2 = container.student_service.create(name="Bella Davis", grade="10th")
    s3 = container.student_service.create(name="Charlie Brown", grade="11th")

    algebra = container.session_service.create(
        name="Algebra 101",
        teacher_id=t1_id,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        start_time=time(9, 0),
        end_time=time(10, 30),
        student_ids=[s1.student_id, s2.student_id],
    )
    physics = container.session_service.create(
        name="Physics Lab",
        teacher_id=t2_id,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 6, 30),
        start_time=time(11, 0),
        end_time=time(13, 0),
        student_ids=[s1.student_id, s3.student_id],
    )

    return World(
        admin=container.admins_repo.get_by_id(admin_id),
        t1=container.teachers_repo.get_by_id(t1_id),
        t2=container.teachers_repo.get_by_id(t2_id),
        s1=s1,
        s2=s2,
        s3=s3,
        algebra=algebra,
        physics=physics,
    )


@pytest.fixture
def app(container):
    app = create_app(container, settings_module="config.testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    """Put an identity in the cookie session, as a successful login would."""

    def _login(identity: Identity) -> None:
        with client.session_transaction() as sess:
            sess["user_id"] = identity.user_id
            sess["role"] = identity.role.value

    return _login
