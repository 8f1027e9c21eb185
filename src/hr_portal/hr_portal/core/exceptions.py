from __future__ import annotations

from typing import Optional

from .enums import LocationErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class LocationError(DomainError):
    """Raised when the device could not report its position."""

    MESSAGES = {
        LocationErrorKind.PERMISSION_DENIED: "Please allow location access to mark attendance",
        LocationErrorKind.UNAVAILABLE: "Location information is unavailable",
        LocationErrorKind.TIMEOUT: "Location request timed out",
    }

    def __init__(self, kind: LocationErrorKind, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or self.MESSAGES[kind])


class OutOfRangeError(DomainError):
    """Raised when the nearest office is farther than the allowed range."""

    def __init__(self, message: str, *, distance_meters: float):
        self.distance_meters = distance_meters
        super().__init__(message)


class DuplicateAttendanceError(DomainError):
    """Raised by repositories when a (user, day) row already exists."""
