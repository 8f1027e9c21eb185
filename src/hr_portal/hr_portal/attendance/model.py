from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceState, AttendanceStatus
from ..geo.model import OfficeLocation


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (user, day).

    Combinations the day can never reach are rejected at construction,
    so a record that exists is always in one of the states below.
    """

    attendance_id: Optional[int]
    user_id: int
    work_date: date
    month: str
    status: AttendanceStatus = AttendanceStatus.PRESENT
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[OfficeLocation] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if self.status == AttendanceStatus.OOO:
            if self.start_time or self.end_time or self.location:
                raise ValueError("an out-of-office record cannot carry start/end time or location")
        elif self.start_time is None:
            raise ValueError("a present record needs a start time")
        if self.end_time is not None and self.start_time is None:
            raise ValueError("end time requires a start time")

    @property
    def state(self) -> AttendanceState:
        if self.status == AttendanceStatus.OOO:
            return AttendanceState.OUT_OF_OFFICE
        if self.end_time is not None:
            return AttendanceState.COMPLETED
        return AttendanceState.STARTED

    def with_id(self, attendance_id: int) -> "AttendanceRecord":
        return replace(self, attendance_id=int(attendance_id))


def state_of(record: Optional[AttendanceRecord]) -> AttendanceState:
    return record.state if record else AttendanceState.NONE


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports (joined with user and department)."""

    user_id: int
    full_name: str
    email: str
    dept_name: Optional[str]
    work_date: date
    status: AttendanceStatus
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    location_name: Optional[str] = None
