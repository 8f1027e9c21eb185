from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceState
from ...geo.model import OfficeLocation
from ..model import AttendanceRecord
from .base import AttendanceTransition


class EndWorkTransition(AttendanceTransition):
    """Check-out: stamps the end time and the office it happened at."""

    allowed_from = frozenset({AttendanceState.STARTED})

    def rejection_message(self, state: AttendanceState) -> str:
        if state == AttendanceState.NONE:
            return "Please start work before ending it"
        if state == AttendanceState.OUT_OF_OFFICE:
            return "You are marked out of office today"
        return "Work has already been ended today"

    def apply(
        self,
        current: Optional[AttendanceRecord],
        *,
        user_id: int,
        now: datetime,
        location: Optional[OfficeLocation],
    ) -> AttendanceRecord:
        self.check(current)
        return replace(current, end_time=now, location=location or current.location)
