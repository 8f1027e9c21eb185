from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.hr_portal.hr_portal.attendance.model import AttendanceRecord
from src.hr_portal.hr_portal.container import wire_services
from src.hr_portal.hr_portal.core.enums import AttendanceState, LeaveStatus, Role
from src.hr_portal.hr_portal.core.exceptions import DuplicateAttendanceError
from src.hr_portal.hr_portal.holidays.calendar import HolidayCalendar
from src.hr_portal.hr_portal.leave.model import ApprovalStep, LeaveApplication
from src.hr_portal.hr_portal.main import create_app
from src.hr_portal.hr_portal.payroll.model import SalaryRecord
from src.hr_portal.hr_portal.users.model import Department, User, UserContext


class InMemoryAttendance:
    """Attendance store keyed by (user_id, work_date), like the UNIQUE key in MySQL."""

    def __init__(self):
        self._by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self.creates = 0
        self.updates = 0

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, work_date))

    def get_recent_for_user(self, user_id: int, limit: int):
        items = [r for r in self._by_user_date.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def list_for_user_month(self, user_id: int, *, month: int, year: int):
        items = [
            r
            for r in self._by_user_date.values()
            if r.user_id == user_id and r.work_date.month == month and r.work_date.year == year
        ]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items

    def create_record(self, record: AttendanceRecord) -> int:
        key = (record.user_id, record.work_date)
        if key in self._by_user_date:
            raise DuplicateAttendanceError(str(key))
        self._id += 1
        self._by_user_date[key] = replace(record, attendance_id=self._id)
        self.creates += 1
        return self._id

    def update_record(self, record: AttendanceRecord, *, expected_state: AttendanceState) -> bool:
        key = (record.user_id, record.work_date)
        stored = self._by_user_date.get(key)
        if not stored or stored.attendance_id != record.attendance_id or stored.state != expected_state:
            return False
        self._by_user_date[key] = record
        self.updates += 1
        return True

    def get_report_rows(self, *, start_date, end_date, user_id=None, dept_id=None):
        return []

    def put(self, record: AttendanceRecord) -> None:
        self._id += 1
        self._by_user_date[(record.user_id, record.work_date)] = replace(record, attendance_id=self._id)


class InMemoryUsers:
    def __init__(self, users: list[User] | None = None):
        self.users_by_id: dict[int, User] = {u.user_id: u for u in users or []}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self.users_by_id.values():
            if u.email == email:
                return u
        return None

    def create_user(self, *, full_name, email, password_hash, role, dept_id, designation=None) -> int:
        user_id = max(self.users_by_id, default=0) + 1
        self.users_by_id[user_id] = User(
            user_id=user_id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            dept_id=dept_id,
            designation=designation,
        )
        return user_id

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        user = self.users_by_id.get(user_id)
        if not user:
            return False
        self.users_by_id[user_id] = replace(user, is_active=is_active)
        return True

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        user = self.users_by_id.get(user_id)
        if not user:
            return False
        self.users_by_id[user_id] = replace(user, password_hash=password_hash)
        return True

    def list_admin_view(self):
        return [{"user_id": u.user_id, "full_name": u.full_name, "email": u.email} for u in self.users_by_id.values()]

    def list_departments(self):
        return [Department(dept_id=1, dept_name="Port Operations")]

    def list_department_members(self, dept_id: int):
        members = [u for u in self.users_by_id.values() if u.dept_id == dept_id and u.is_active]
        return sorted(members, key=lambda u: u.full_name)


def make_user(
    user_id: int = 1,
    *,
    role: Role = Role.STAFF,
    password: str = "secret123",
    is_active: bool = True,
    dept_id: Optional[int] = 1,
) -> User:
    return User(
        user_id=user_id,
        full_name=f"User {user_id}",
        email=f"user{user_id}@example.com",
        password_hash=generate_password_hash(password),
        role=role,
        dept_id=dept_id,
        designation="Port Officer",
        is_active=is_active,
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            make_user(1),
            make_user(2),
            make_user(3, dept_id=2),
            make_user(5, role=Role.DEPARTMENT_ADMIN, password="hod12345"),
            make_user(9, role=Role.ADMIN, password="admin123"),
        ]
    )


@pytest.fixture
def staff():
    return UserContext(user_id=1, full_name="User 1", role=Role.STAFF, dept_id=1)


@pytest.fixture
def other_staff():
    return UserContext(user_id=2, full_name="User 2", role=Role.STAFF, dept_id=1)


@pytest.fixture
def head():
    return UserContext(user_id=5, full_name="User 5", role=Role.DEPARTMENT_ADMIN, dept_id=1)


@pytest.fixture
def admin():
    return UserContext(user_id=9, full_name="User 9", role=Role.ADMIN, dept_id=1)


class InMemoryLeave:
    """Leave store with the same conditional decision rule as the SQL guard."""

    def __init__(self):
        self.items: dict[int, LeaveApplication] = {}

    def create(self, *, user_id, dept_id, reason, starts_at, ends_at) -> int:
        leave_id = len(self.items) + 1
        self.items[leave_id] = LeaveApplication(
            leave_id=leave_id,
            user_id=user_id,
            dept_id=dept_id,
            reason=reason,
            starts_at=starts_at,
            ends_at=ends_at,
            status=LeaveStatus.PENDING,
            created_at=starts_at,
        )
        return leave_id

    def get(self, leave_id: int) -> Optional[LeaveApplication]:
        return self.items.get(leave_id)

    def list_applications(self, *, user_id=None, dept_id=None, awaiting=None, limit=200):
        items = [
            a
            for a in reversed(list(self.items.values()))
            if (user_id is None or a.user_id == user_id)
            and (dept_id is None or a.dept_id == dept_id)
            and (awaiting is None or a.awaiting == awaiting)
        ]
        return items[:limit]

    def record_decision(self, leave_id, *, level, decision, decided_by, note, overall) -> bool:
        current = self.items.get(leave_id)
        if not current or current.awaiting != level:
            return False
        step = ApprovalStep(status=decision, decided_by=decided_by, decided_at=datetime(2025, 10, 20, 10, 0), note=note)
        self.items[leave_id] = replace(current, status=overall, **{level.value: step})
        return True


class InMemorySalaries:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.rows: dict[tuple[int, str, str], SalaryRecord] = {}

    def upsert(self, record: SalaryRecord) -> None:
        self.rows[(record.user_id, record.month, record.year)] = record

    def get_for_user_month(self, user_id, month, year):
        return self.rows.get((user_id, month, year))

    def list_for_user(self, user_id):
        return [r for (uid, _, _), r in self.rows.items() if uid == user_id]

    def list_for_department(self, dept_id, month, year):
        return [
            r
            for (uid, m, y), r in self.rows.items()
            if m == month and y == year and self._users.get_by_id(uid).dept_id == dept_id
        ]


@pytest.fixture
def leave_repo():
    return InMemoryLeave()


@pytest.fixture
def salaries_repo(users_repo):
    return InMemorySalaries(users_repo)


class FakeWeeklyReports:
    def __init__(self):
        self.created = []

    def create(self, **kwargs):
        self.created.append(kwargs)
        return len(self.created)

    def list_for_user(self, user_id, *, limit=50):
        return []

    def list_for_department(self, dept_id, *, limit=200):
        return [{"dept_id": dept_id}]


@pytest.fixture
def client(monkeypatch, attendance_repo, users_repo, leave_repo, salaries_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    container = wire_services(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        weekly_reports_repo=FakeWeeklyReports(),
        leave_repo=leave_repo,
        salaries_repo=salaries_repo,
        holiday_calendar=HolidayCalendar([]),
    )
    app = create_app(container=container)
    return app.test_client()
