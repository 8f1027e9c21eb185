from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import Database
from .model import WeeklyReport
from .repository import WeeklyReportRepository


class MySQLWeeklyReportRepository(WeeklyReportRepository):
    def __init__(self, db: Database):
        self._db = db

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
        with self._db.cursor() as cur:
            cur.execute(
                """
                INSERT INTO weekly_reports(user_id, report, week_ending, submitted_at, month, year)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (user_id, report, week_ending, submitted_at, month, year),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int, *, limit: int = 50) -> Sequence[WeeklyReport]:
        with self._db.cursor() as cur:
            cur.execute(
                """
                SELECT report_id, user_id, report, week_ending, submitted_at, month, year
                FROM weekly_reports
                WHERE user_id=%s
                ORDER BY submitted_at DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            return [
                WeeklyReport(
                    report_id=int(r["report_id"]),
                    user_id=int(r["user_id"]),
                    report=r["report"],
                    week_ending=r["week_ending"],
                    submitted_at=r["submitted_at"],
                    month=r["month"],
                    year=str(r["year"]),
                )
                for r in cur.fetchall()
            ]

    def list_for_department(self, dept_id: int, *, limit: int = 200) -> Sequence[dict]:
        with self._db.cursor() as cur:
            cur.execute(
                """
                SELECT wr.report_id, wr.user_id, u.full_name, wr.report, wr.week_ending, wr.submitted_at
                FROM weekly_reports wr
                JOIN users u ON u.user_id = wr.user_id
                WHERE u.dept_id=%s
                ORDER BY wr.submitted_at DESC
                LIMIT %s
                """,
                (int(dept_id), int(limit)),
            )
            return [
                {
                    "report_id": int(r["report_id"]),
                    "user_id": int(r["user_id"]),
                    "full_name": r["full_name"],
                    "report": r["report"],
                    "week_ending": r["week_ending"].strftime("%Y-%m-%d"),
                    "submitted_at": r["submitted_at"].strftime("%Y-%m-%d %H:%M"),
                }
                for r in cur.fetchall()
            ]
