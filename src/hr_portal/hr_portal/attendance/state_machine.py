from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceAction, AttendanceState
from ..geo.model import OfficeLocation
from .factory import AttendanceTransitionFactory
from .model import AttendanceRecord, state_of


@dataclass(frozen=True)
class TransitionResult:
    record: AttendanceRecord
    previous_state: AttendanceState

    @property
    def created(self) -> bool:
        """True when the write must create the row, False for a patch."""
        return self.previous_state == AttendanceState.NONE


def transition(
    current: Optional[AttendanceRecord],
    action: AttendanceAction,
    *,
    user_id: int,
    now: datetime,
    location: Optional[OfficeLocation] = None,
    factory: Optional[AttendanceTransitionFactory] = None,
) -> TransitionResult:
    """Compute the next record for `action` given today's record (or None).

    Raises ValidationError for an illegal action; `current` is never modified.
    """

    if current is not None and current.user_id != user_id:
        raise ValueError("record belongs to another user")

    strategy = (factory or AttendanceTransitionFactory()).for_action(action)
    record = strategy.apply(current, user_id=user_id, now=now, location=location)
    return TransitionResult(record=record, previous_state=state_of(current))
