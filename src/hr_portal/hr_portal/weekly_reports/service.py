from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import end_of_day, month_label, now_local
from ..common.validators import require_non_empty
from ..users.model import UserContext, department_scope
from .repository import WeeklyReportRepository


class WeeklyReportService:
    def __init__(self, reports: WeeklyReportRepository):
        self._reports = reports

    def submit(self, user: UserContext, report: str, *, now: Optional[datetime] = None) -> int:
        text = require_non_empty(report, "Weekly report")
        now = now or now_local()
        return self._reports.create(
            user_id=user.user_id,
            report=text,
            week_ending=end_of_day(now.date()),
            submitted_at=now,
            month=month_label(now.date()),
            year=str(now.year),
        )

    def list_mine(self, user: UserContext, *, limit: int = 50):
        return self._reports.list_for_user(user.user_id, limit=limit)

    def list_for_department(self, user: UserContext, *, dept_id: Optional[int] = None):
        return self._reports.list_for_department(department_scope(user, dept_id))
