from __future__ import annotations

from ..core.constants import OFFICE_RANGE_METERS
from ..core.exceptions import OutOfRangeError
from .model import GeoResolution, OfficeLocation
from .resolver import round_meters


def ensure_within_range(resolution: GeoResolution, *, max_distance_meters: float = OFFICE_RANGE_METERS) -> OfficeLocation:
    """Return the matched office, or raise OutOfRangeError.

    The range is inclusive: exactly `max_distance_meters` away is accepted.
    """

    if resolution.office is None:
        raise OutOfRangeError(
            "You are not within the allowed geographical range",
            distance_meters=resolution.distance_meters,
        )
    if resolution.distance_meters > max_distance_meters:
        limit = round_meters(max_distance_meters)
        raise OutOfRangeError(
            f"You are not within {limit} meters of any office location. "
            f"Nearest office is {round_meters(resolution.distance_meters)}m away.",
            distance_meters=resolution.distance_meters,
        )
    return resolution.office
