from __future__ import annotations

from typing import Any, Mapping, Protocol

from ..core.enums import LocationErrorKind
from ..core.exceptions import LocationError, ValidationError
from .model import GeoPoint

# navigator.geolocation error codes
_ERROR_CODES = {
    1: LocationErrorKind.PERMISSION_DENIED,
    2: LocationErrorKind.UNAVAILABLE,
    3: LocationErrorKind.TIMEOUT,
}


class LocationProvider(Protocol):
    """Device location collaborator.

    Returns the current position or raises LocationError.
    """

    def acquire(self) -> GeoPoint:
        raise NotImplementedError


class StaticLocationProvider:
    """Provider around an already known point (scripts, tests)."""

    def __init__(self, point: GeoPoint):
        self._point = point

    def acquire(self) -> GeoPoint:
        return self._point


class RequestLocationProvider:
    """Location reported by the browser in the request body.

    The client either sends {"latitude": .., "longitude": ..} or the
    geolocation failure it got, as {"error": 1|2|3} or
    {"error": "permission_denied"|"unavailable"|"timeout"}.
    """

    def __init__(self, payload: Mapping[str, Any] | None):
        self._payload = dict(payload or {})

    @staticmethod
    def _error_kind(value: Any) -> LocationErrorKind:
        if isinstance(value, int) and value in _ERROR_CODES:
            return _ERROR_CODES[value]
        try:
            return LocationErrorKind(str(value).strip().lower())
        except ValueError:
            return LocationErrorKind.UNAVAILABLE

    def acquire(self) -> GeoPoint:
        error = self._payload.get("error")
        if error is not None:
            raise LocationError(self._error_kind(error))

        lat = self._payload.get("latitude")
        lon = self._payload.get("longitude")
        if lat is None or lon is None:
            raise LocationError(LocationErrorKind.UNAVAILABLE)

        try:
            return GeoPoint(latitude=float(lat), longitude=float(lon))
        except (TypeError, ValueError):
            raise ValidationError("Latitude/longitude must be numbers")
