from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceState
from ...core.exceptions import ValidationError
from ...geo.model import OfficeLocation
from ..model import AttendanceRecord


class AttendanceTransition(ABC):
    """Strategy Pattern: one action on the daily attendance record."""

    #: states this action may start from
    allowed_from: frozenset[AttendanceState] = frozenset()

    def check(self, current: Optional[AttendanceRecord]) -> None:
        state = current.state if current else AttendanceState.NONE
        if state not in self.allowed_from:
            raise ValidationError(self.rejection_message(state))

    @abstractmethod
    def rejection_message(self, state: AttendanceState) -> str:
        raise NotImplementedError

    @abstractmethod
    def apply(
        self,
        current: Optional[AttendanceRecord],
        *,
        user_id: int,
        now: datetime,
        location: Optional[OfficeLocation],
    ) -> AttendanceRecord:
        raise NotImplementedError
