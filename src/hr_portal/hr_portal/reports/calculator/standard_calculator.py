from __future__ import annotations

from .base import WorkedTimeCalculator
from ...attendance.model import AttendanceReportRow


class StandardWorkedTimeCalculator(WorkedTimeCalculator):
    """Standard rule: end - start, not below 0. Open or out-of-office days count 0."""

    def worked_minutes(self, row: AttendanceReportRow) -> int:
        if not row.start_time or not row.end_time:
            return 0
        minutes = int((row.end_time - row.start_time).total_seconds() // 60)
        return max(minutes, 0)
