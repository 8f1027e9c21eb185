from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceState
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user_month(self, user_id: int, *, month: int, year: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_record(self, record: AttendanceRecord) -> int:
        """Insert today's row.

        Must raise DuplicateAttendanceError if a row for (user_id, work_date)
        already exists. Returns attendance_id.
        """

        raise NotImplementedError

    def update_record(self, record: AttendanceRecord, *, expected_state: AttendanceState) -> bool:
        """Patch an existing row only while it is still in `expected_state`.

        Returns False when the stored row moved on (or vanished).
        """

        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        dept_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
