from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OfficeLocation:
    """Registered office. Defined at deploy time, never changed at runtime."""

    name: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeoPoint:
    """Position reported by a device at the moment of a check-in attempt."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeoResolution:
    office: Optional[OfficeLocation]
    distance_meters: float = math.inf


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, latitude: float, longitude: float) -> bool:
        return self.min_lat <= latitude <= self.max_lat and self.min_lon <= longitude <= self.max_lon
