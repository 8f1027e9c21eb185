from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceAction
from .strategies.base import AttendanceTransition
from .strategies.end_strategy import EndWorkTransition
from .strategies.ooo_strategy import OutOfOfficeTransition
from .strategies.start_strategy import StartWorkTransition


@dataclass
class AttendanceTransitionFactory:
    """Factory Pattern: choose the transition for a requested action."""

    def for_action(self, action: AttendanceAction) -> AttendanceTransition:
        if action == AttendanceAction.START:
            return StartWorkTransition()
        if action == AttendanceAction.END:
            return EndWorkTransition()
        return OutOfOfficeTransition()
