from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.enums import HolidayCategory
from .model import HolidayAdvisory, HolidayEntry

DEFAULT_HOLIDAYS_PATH = Path(__file__).resolve().parent / "data" / "holidays.json"

WEEKEND = "Weekend"
PUBLIC_HOLIDAY = "Public Holiday"
OPTIONAL_HOLIDAY = "Optional Holiday"


def is_weekend(day: date) -> bool:
    """Sundays plus the 2nd and 4th Saturday of the month."""
    weekday = day.weekday()
    if weekday == 6:
        return True
    if weekday == 5:
        week_of_month = (day.day - 1) // 7 + 1
        return week_of_month % 2 == 0
    return False


class HolidayCalendar:
    """Read-only holiday table, loaded once at start-up."""

    def __init__(self, entries: Iterable[HolidayEntry]):
        self._entries: tuple[HolidayEntry, ...] = tuple(sorted(entries, key=lambda e: e.date))
        self._public = {e.date: e for e in self._entries if e.category == HolidayCategory.PUBLIC}
        self._optional = {e.date: e for e in self._entries if e.category == HolidayCategory.OPTIONAL}

    @classmethod
    def from_dict(cls, data: dict) -> "HolidayCalendar":
        entries: list[HolidayEntry] = []
        for key, category in (("publicHolidays", HolidayCategory.PUBLIC), ("optionalHolidays", HolidayCategory.OPTIONAL)):
            for item in data.get(key) or []:
                entries.append(HolidayEntry(date=parse_iso_date(item["date"]), name=item["name"], category=category))
        return cls(entries)

    @classmethod
    def load(cls, path: str | Path = DEFAULT_HOLIDAYS_PATH) -> "HolidayCalendar":
        with open(path, encoding="utf-8") as fh:
            return cls.from_dict(json.load(fh))

    def lookup(self, day: date) -> Optional[HolidayEntry]:
        return self._public.get(day) or self._optional.get(day)

    def list_year(self, year: int) -> Sequence[HolidayEntry]:
        return [e for e in self._entries if e.date.year == int(year)]

    def advisory(self, day: date) -> Optional[HolidayAdvisory]:
        weekend = is_weekend(day)
        holiday = self.lookup(day)
        if not weekend and holiday is None:
            return None

        if weekend:
            kind = WEEKEND
        elif holiday.category == HolidayCategory.PUBLIC:
            kind = PUBLIC_HOLIDAY
        else:
            kind = OPTIONAL_HOLIDAY
        return HolidayAdvisory(kind=kind, name=holiday.name if holiday else WEEKEND)
