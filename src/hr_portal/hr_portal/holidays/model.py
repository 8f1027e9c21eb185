from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import HolidayCategory


@dataclass(frozen=True)
class HolidayEntry:
    date: date
    name: str
    category: HolidayCategory


@dataclass(frozen=True)
class HolidayAdvisory:
    """Informational banner for the dashboard. Never blocks an action."""

    kind: str  # "Weekend" | "Public Holiday" | "Optional Holiday"
    name: str

    @property
    def message(self) -> str:
        if self.kind == "Weekend":
            return "Today is a Weekend"
        return f"Today is a {self.kind}: {self.name}"
