from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import now_local, to_epoch_seconds
from ..core.constants import DEFAULT_HISTORY_LIMIT, OFFICE_RANGE_METERS
from ..core.enums import AttendanceAction, AttendanceState, AttendanceStatus
from ..core.exceptions import AuthorizationError, DomainError, DuplicateAttendanceError, ValidationError
from ..geo.model import GeoResolution, OfficeLocation
from ..geo.policy import ensure_within_range
from ..geo.provider import LocationProvider
from ..geo.resolver import GeoResolver
from ..holidays.calendar import HolidayCalendar
from ..holidays.model import HolidayAdvisory
from ..users.model import UserContext
from ..users.repository import UserRepository
from .factory import AttendanceTransitionFactory
from .model import AttendanceRecord, state_of
from .repository import AttendanceRepository
from .state_machine import TransitionResult, transition

logger = logging.getLogger(__name__)

# one re-read after losing a create/update race
_MAX_WRITE_ATTEMPTS = 2


@dataclass(frozen=True)
class AttendanceOutcome:
    action: AttendanceAction
    record: AttendanceRecord
    office: Optional[OfficeLocation]
    distance_meters: Optional[float]
    advisory: Optional[HolidayAdvisory]
    message: str


class AttendanceService:
    """Attendance upload flow plus the read side used by the dashboard."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository | None = None,
        *,
        resolver: GeoResolver | None = None,
        calendar: HolidayCalendar | None = None,
        transition_factory: AttendanceTransitionFactory | None = None,
        max_distance_meters: float = OFFICE_RANGE_METERS,
    ):
        self._attendance = attendance
        self._users = users
        self._resolver = resolver or GeoResolver()
        self._calendar = calendar
        self._factory = transition_factory or AttendanceTransitionFactory()
        self._max_distance = float(max_distance_meters)

    def today_advisory(self, today: date) -> Optional[HolidayAdvisory]:
        if not self._calendar:
            return None
        return self._calendar.advisory(today)

    def locate(self, provider: LocationProvider) -> tuple[OfficeLocation, GeoResolution]:
        """Acquire the device position and match it to an office in range."""
        point = provider.acquire()
        resolution = self._resolver.resolve(point)
        office = ensure_within_range(resolution, max_distance_meters=self._max_distance)
        return office, resolution

    def _ensure_active(self, user: UserContext) -> None:
        if not self._users:
            return
        account = self._users.get_by_id(user.user_id)
        if not account:
            raise ValidationError("Employee does not exist")
        if not account.is_active:
            raise AuthorizationError("This account has been deactivated")

    def submit(
        self,
        user: UserContext,
        action: AttendanceAction | str,
        *,
        location_provider: LocationProvider | None = None,
        now: datetime | None = None,
    ) -> AttendanceOutcome:
        try:
            action = AttendanceAction(action)
        except ValueError:
            raise ValidationError(f"Unknown attendance action: {action}")

        now = now or now_local()
        today = now.date()
        advisory = self.today_advisory(today)

        self._ensure_active(user)

        office: Optional[OfficeLocation] = None
        distance: Optional[float] = None
        if action.needs_location:
            if location_provider is None:
                raise ValidationError("Location is required to mark attendance")
            try:
                office, resolution = self.locate(location_provider)
            except DomainError as e:
                logger.info("attendance %s rejected for user=%s: %s", action.value, user.user_id, e)
                raise
            distance = resolution.distance_meters

        record = self._apply(user, action, now=now, office=office)

        if action == AttendanceAction.OOO:
            message = "Out of office status marked successfully"
        else:
            message = f"Attendance marked at {office.name}"
        logger.info(
            "attendance %s saved for user=%s date=%s office=%s",
            action.value,
            user.user_id,
            today.isoformat(),
            office.name if office else "-",
        )

        return AttendanceOutcome(
            action=action,
            record=record,
            office=office,
            distance_meters=distance,
            advisory=advisory,
            message=message,
        )

    def _apply(
        self,
        user: UserContext,
        action: AttendanceAction,
        *,
        now: datetime,
        office: Optional[OfficeLocation],
    ) -> AttendanceRecord:
        for attempt in range(1, _MAX_WRITE_ATTEMPTS + 1):
            current = self._attendance.get_for_user_and_date(user.user_id, now.date())
            result = transition(
                current,
                action,
                user_id=user.user_id,
                now=now,
                location=office,
                factory=self._factory,
            )
            saved = self._save(result)
            if saved is not None:
                return saved
            logger.warning(
                "attendance write conflict for user=%s date=%s (attempt %s)",
                user.user_id,
                now.date().isoformat(),
                attempt,
            )

        raise ValidationError("Attendance changed while saving, please refresh and try again")

    def _save(self, result: TransitionResult) -> Optional[AttendanceRecord]:
        """Conditional write: create if missing, otherwise patch the expected state."""
        if result.created:
            try:
                attendance_id = self._attendance.create_record(result.record)
            except DuplicateAttendanceError:
                return None
            return result.record.with_id(attendance_id)

        ok = self._attendance.update_record(result.record, expected_state=result.previous_state)
        return result.record if ok else None

    def get_today_record(self, user_id: int, today: date) -> Optional[AttendanceRecord]:
        """Get today's attendance record for a user"""
        return self._attendance.get_for_user_and_date(user_id, today)

    def get_today_state(self, user_id: int, today: date) -> AttendanceState:
        return state_of(self.get_today_record(user_id, today))

    def get_history_ui(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT):
        rows = self._attendance.get_recent_for_user(user_id, limit)
        return [self.to_ui(r) for r in rows]

    def list_month(self, user_id: int, *, month: int, year: int):
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        return self._attendance.list_for_user_month(user_id, month=int(month), year=int(year))

    @staticmethod
    def status_display(record: Optional[AttendanceRecord]) -> str:
        if record is None:
            return "Absent"
        if record.status == AttendanceStatus.OOO:
            return "Out of Office"
        if record.start_time and record.end_time:
            return "Present"
        if record.start_time:
            return "Half Day Present"
        return "Absent"

    def to_ui(self, r: AttendanceRecord) -> dict:
        css = {
            "Out of Office": "bg-purple",
            "Present": "bg-success",
            "Half Day Present": "bg-warning text-dark",
        }
        label = self.status_display(r)
        return {
            "date": r.work_date.strftime("%Y-%m-%d"),
            "start_time": r.start_time.strftime("%H:%M:%S") if r.start_time else "-",
            "end_time": r.end_time.strftime("%H:%M:%S") if r.end_time else "-",
            "location": r.location.name if r.location else "-",
            "status": label,
            "css_class": css.get(label, "bg-secondary"),
        }

    @staticmethod
    def to_api(r: Optional[AttendanceRecord]) -> Optional[dict]:
        if r is None:
            return None
        return {
            "id": r.attendance_id,
            "userId": r.user_id,
            "date": r.work_date.isoformat(),
            "month": r.month,
            "status": r.status.value,
            "state": r.state.value,
            "startTime": to_epoch_seconds(r.start_time),
            "endTime": to_epoch_seconds(r.end_time),
            "location": (
                {"name": r.location.name, "latitude": r.location.latitude, "longitude": r.location.longitude}
                if r.location
                else None
            ),
        }
