from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import month_label
from ...core.enums import AttendanceState, AttendanceStatus
from ...geo.model import OfficeLocation
from ..model import AttendanceRecord
from .base import AttendanceTransition


class OutOfOfficeTransition(AttendanceTransition):
    """Marks the whole day out of office. Terminal for the day."""

    allowed_from = frozenset({AttendanceState.NONE})

    def rejection_message(self, state: AttendanceState) -> str:
        if state == AttendanceState.OUT_OF_OFFICE:
            return "Out of office is already marked for today"
        return "Work has already been started today, it cannot be marked out of office"

    def apply(
        self,
        current: Optional[AttendanceRecord],
        *,
        user_id: int,
        now: datetime,
        location: Optional[OfficeLocation],
    ) -> AttendanceRecord:
        self.check(current)
        today = now.date()
        return AttendanceRecord(
            attendance_id=None,
            user_id=user_id,
            work_date=today,
            month=month_label(today),
            status=AttendanceStatus.OOO,
            created_at=now,
        )
