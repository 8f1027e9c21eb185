from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .attendance.factory import AttendanceTransitionFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import OFFICE_RANGE_METERS
from .database.connection import Database, DBConfig
from .geo.resolver import GeoResolver
from .holidays.calendar import HolidayCalendar
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .payroll.calculator.standard_calculator import StandardPayslipCalculator
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.repository import SalaryRepository
from .payroll.service import PayrollService
from .reports.service import AttendanceReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .weekly_reports.mysql_weekly_report_repository import MySQLWeeklyReportRepository
from .weekly_reports.repository import WeeklyReportRepository
from .weekly_reports.service import WeeklyReportService


@dataclass(frozen=True)
class Container:
    """Everything the controllers need, wired once per app."""

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    weekly_reports_repo: WeeklyReportRepository
    leave_repo: LeaveRepository
    salaries_repo: SalaryRepository

    holiday_calendar: HolidayCalendar
    geo_resolver: GeoResolver

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    weekly_report_service: WeeklyReportService
    leave_service: LeaveService
    payroll_service: PayrollService


def wire_services(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    weekly_reports_repo: WeeklyReportRepository,
    leave_repo: LeaveRepository,
    salaries_repo: SalaryRepository,
    holiday_calendar: HolidayCalendar,
    geo_resolver: GeoResolver | None = None,
    office_range_meters: float = OFFICE_RANGE_METERS,
) -> Container:
    geo_resolver = geo_resolver or GeoResolver()
    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        weekly_reports_repo=weekly_reports_repo,
        leave_repo=leave_repo,
        salaries_repo=salaries_repo,
        holiday_calendar=holiday_calendar,
        geo_resolver=geo_resolver,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            resolver=geo_resolver,
            calendar=holiday_calendar,
            transition_factory=AttendanceTransitionFactory(),
            max_distance_meters=office_range_meters,
        ),
        report_service=AttendanceReportService(attendance_repo),
        weekly_report_service=WeeklyReportService(weekly_reports_repo),
        leave_service=LeaveService(leave_repo),
        payroll_service=PayrollService(salaries_repo, users_repo, StandardPayslipCalculator()),
    )


def build_container(*, db_config: Mapping[str, Any], office_range_meters: float = OFFICE_RANGE_METERS) -> Container:
    db = Database(DBConfig.from_settings(db_config))
    return wire_services(
        users_repo=MySQLUserRepository(db),
        attendance_repo=MySQLAttendanceRepository(db),
        weekly_reports_repo=MySQLWeeklyReportRepository(db),
        leave_repo=MySQLLeaveRepository(db),
        salaries_repo=MySQLSalaryRepository(db),
        holiday_calendar=HolidayCalendar.load(),
        office_range_meters=office_range_meters,
    )
