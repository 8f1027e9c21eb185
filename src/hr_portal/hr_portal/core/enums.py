from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    DEPARTMENT_ADMIN = "department_admin"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Status stored on the daily attendance row."""

    PRESENT = "present"
    OOO = "ooo"


class AttendanceAction(str, Enum):
    START = "start"
    END = "end"
    OOO = "ooo"

    @property
    def needs_location(self) -> bool:
        return self is not AttendanceAction.OOO


class AttendanceState(str, Enum):
    """Per (user, day) state derived from the stored record."""

    NONE = "NONE"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    OUT_OF_OFFICE = "OUT_OF_OFFICE"


class HolidayCategory(str, Enum):
    PUBLIC = "public"
    OPTIONAL = "optional"


class LocationErrorKind(str, Enum):
    """Device location failures, numbered like the browser geolocation API."""

    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"


class LeaveStatus(str, Enum):
    """Overall leave status and the status of each approval step."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalLevel(str, Enum):
    HOD = "hod"
    CEO = "ceo"
