from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class WeeklyReport:
    report_id: int
    user_id: int
    report: str
    week_ending: datetime
    submitted_at: datetime
    month: str
    year: str
