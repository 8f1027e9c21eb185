from __future__ import annotations

import math
from typing import Optional, Sequence

from ..core.constants import ALLOWED_LAT_RANGE, ALLOWED_LON_RANGE, METERS_PER_DEGREE
from .model import BoundingBox, GeoPoint, GeoResolution, OfficeLocation
from .offices import OFFICE_LOCATIONS

DEFAULT_BOUNDING_BOX = BoundingBox(
    min_lat=ALLOWED_LAT_RANGE[0],
    max_lat=ALLOWED_LAT_RANGE[1],
    min_lon=ALLOWED_LON_RANGE[0],
    max_lon=ALLOWED_LON_RANGE[1],
)


def planar_distance_meters(a_lat: float, a_lon: float, b_lat: float, b_lon: float) -> float:
    """Approximate distance, one degree taken as 111 km on both axes.

    Longitude compression is not corrected. This is only valid inside the
    small regional box, and changing it would change which office wins near
    the box edges.
    """
    lat_diff = a_lat - b_lat
    lon_diff = a_lon - b_lon
    return math.sqrt(lat_diff * lat_diff + lon_diff * lon_diff) * METERS_PER_DEGREE


class GeoResolver:
    """Finds the nearest registered office for a device position.

    Pure: no I/O and no state beyond the office table given at construction.
    """

    def __init__(
        self,
        offices: Sequence[OfficeLocation] = OFFICE_LOCATIONS,
        *,
        box: BoundingBox = DEFAULT_BOUNDING_BOX,
    ):
        self._offices = tuple(offices)
        self._box = box

    def in_range(self, point: GeoPoint) -> bool:
        return self._box.contains(point.latitude, point.longitude)

    def resolve(self, point: GeoPoint) -> GeoResolution:
        if not self.in_range(point):
            return GeoResolution(office=None, distance_meters=math.inf)

        nearest: Optional[OfficeLocation] = None
        shortest = math.inf

        for office in self._offices:
            # Offices outside the box are never candidates.
            if not self._box.contains(office.latitude, office.longitude):
                continue
            distance = planar_distance_meters(point.latitude, point.longitude, office.latitude, office.longitude)
            if distance < shortest:
                shortest = distance
                nearest = office

        if nearest is None:
            return GeoResolution(office=None, distance_meters=math.inf)
        return GeoResolution(office=nearest, distance_meters=shortest)


def round_meters(distance: float) -> int:
    """Round half up, the way the check-in messages always have."""
    return int(math.floor(distance + 0.5))


def format_distance(distance: float) -> str:
    if math.isinf(distance):
        return "Out of range"
    if distance < 1000:
        return f"{round_meters(distance)} meters"
    return f"{distance / 1000:.2f} km"
