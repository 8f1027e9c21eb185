from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..attendance.model import AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..core.constants import EARLY_LEAVE_CUTOFF, ON_TIME_CUTOFF, OVERTIME_CUTOFF
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .calculator.base import WorkedTimeCalculator
from .calculator.standard_calculator import StandardWorkedTimeCalculator

CSV_FIELDS = [
    "work_date",
    "user_id",
    "full_name",
    "email",
    "dept_name",
    "start_time",
    "end_time",
    "worked_hours",
    "status",
    "location",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def _hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _status_label(r: AttendanceReportRow) -> str:
    if r.status == AttendanceStatus.OOO:
        return "Out of Office"
    if r.start_time and r.end_time:
        return "Present"
    if r.start_time:
        return "Half Day Present"
    return "Absent"


class AttendanceReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[WorkedTimeCalculator] = None,
        on_time_cutoff: time = time(*ON_TIME_CUTOFF),
        early_leave_cutoff: time = time(*EARLY_LEAVE_CUTOFF),
        overtime_cutoff: time = time(*OVERTIME_CUTOFF),
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardWorkedTimeCalculator()
        self._on_time_cutoff = on_time_cutoff
        self._early_leave_cutoff = early_leave_cutoff
        self._overtime_cutoff = overtime_cutoff

    def _is_on_time(self, start: datetime) -> bool:
        return start.time().replace(second=0, microsecond=0) <= self._on_time_cutoff

    def _is_early_leave(self, end: datetime) -> bool:
        return end.time().replace(second=0, microsecond=0) < self._early_leave_cutoff

    def _is_overtime(self, end: datetime) -> bool:
        return end.time().replace(second=0, microsecond=0) > self._overtime_cutoff

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
        dept_id: Optional[int] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must not be before start date")

        query_rows = self._attendance.get_report_rows(start_date=start, end_date=end, user_id=user_id, dept_id=dept_id)

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            minutes = self._calculator.worked_minutes(r)

            out_rows.append(
                {
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "user_id": r.user_id,
                    "full_name": r.full_name,
                    "email": r.email,
                    "dept_name": r.dept_name or "-",
                    "start_time": r.start_time.strftime("%H:%M") if r.start_time else "-",
                    "end_time": r.end_time.strftime("%H:%M") if r.end_time else "-",
                    "worked_hours": _hhmm(minutes),
                    "status": _status_label(r),
                    "location": r.location_name or ("N/A" if r.status == AttendanceStatus.OOO else "-"),
                }
            )

            s = summary_map.get(r.user_id)
            if not s:
                s = {
                    "user_id": r.user_id,
                    "full_name": r.full_name,
                    "dept_name": r.dept_name or "-",
                    "work_days": 0,
                    "total_minutes": 0,
                    "on_time": 0,
                    "late": 0,
                    "early_leave": 0,
                    "overtime": 0,
                    "out_of_office": 0,
                }
                summary_map[r.user_id] = s

            if r.status == AttendanceStatus.OOO:
                s["out_of_office"] += 1
                continue
            if not (r.start_time and r.end_time):
                continue

            s["work_days"] += 1
            s["total_minutes"] += minutes
            if self._is_on_time(r.start_time):
                s["on_time"] += 1
            else:
                s["late"] += 1
            if self._is_early_leave(r.end_time):
                s["early_leave"] += 1
            if self._is_overtime(r.end_time):
                s["overtime"] += 1

        summary = []
        for s in summary_map.values():
            total_minutes = int(s.pop("total_minutes"))
            work_days = s["work_days"]
            s["total_hours"] = _hhmm(total_minutes)
            s["avg_hours_per_day"] = round(total_minutes / 60 / work_days, 1) if work_days else 0
            s["_total_minutes"] = total_minutes
            summary.append(s)

        summary.sort(key=lambda x: x["_total_minutes"], reverse=True)
        for s in summary:
            del s["_total_minutes"]
        return ReportData(rows=out_rows, summary=summary)
