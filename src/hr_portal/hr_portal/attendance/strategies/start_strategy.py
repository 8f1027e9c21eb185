from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import month_label
from ...core.enums import AttendanceState, AttendanceStatus
from ...geo.model import OfficeLocation
from ..model import AttendanceRecord
from .base import AttendanceTransition


class StartWorkTransition(AttendanceTransition):
    """Check-in: creates today's record."""

    allowed_from = frozenset({AttendanceState.NONE})

    def rejection_message(self, state: AttendanceState) -> str:
        if state == AttendanceState.OUT_OF_OFFICE:
            return "You are marked out of office today"
        return "Work has already been started today"

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
            status=AttendanceStatus.PRESENT,
            start_time=now,
            location=location,
            created_at=now,
        )
