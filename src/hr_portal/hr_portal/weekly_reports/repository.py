from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import WeeklyReport


class WeeklyReportRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        report: str,
        week_ending: datetime,
        submitted_at: datetime,
        month: str,
        year: str,
    ) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int = 50) -> Sequence[WeeklyReport]:
        raise NotImplementedError

    def list_for_department(self, dept_id: int, *, limit: int = 200) -> Sequence[dict]:
        """Reports joined with author name, newest first."""

        raise NotImplementedError
