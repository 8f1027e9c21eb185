from __future__ import annotations

import calendar
from datetime import date, datetime, time


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_label(value: date) -> str:
    """English month name ("January"), independent of the process locale."""
    return calendar.month_name[value.month]


def end_of_day(value: date) -> datetime:
    """Last whole second of the day; DATETIME columns keep no fractions."""
    return datetime.combine(value, time(23, 59, 59))


def to_epoch_seconds(value: datetime | None) -> dict | None:
    """Timestamp shape used by the JSON API: {"seconds": <epoch>}."""
    if value is None:
        return None
    return {"seconds": int(value.timestamp())}


def parse_iso_datetime(value: str) -> datetime:
    """Parse "YYYY-MM-DDTHH:MM" (seconds optional), as sent by datetime-local inputs."""
    return datetime.fromisoformat(value.strip())
