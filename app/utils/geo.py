# path: trip-briefing-api/app/utils/geo.py

from __future__ import annotations

from typing import Dict, Iterable, Protocol, Sequence
import math


EARTH_RADIUS_KM = 6371.0


class LatLon(Protocol):
    latitude: float
    longitude: float


def great_circle_distance_km(a: LatLon, b: LatLon) -> float:
    # Haversine on a sphere. Every progress number is composed from this, keep the formula as-is.
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude) - math.radians(a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h just outside [0, 1] for near-antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def polyline_length_km(points: Sequence[LatLon], end: int | None = None) -> float:
    """
    Sum of consecutive segment lengths from points[0] up to points[end]
    (the whole polyline when end is None).
    """
    last = len(points) - 1 if end is None else end
    total = 0.0
    for i in range(last):
        total += great_circle_distance_km(points[i], points[i + 1])
    return total


def bbox(points: Iterable[LatLon]) -> Dict[str, float]:
    lats = []
    lons = []
    for p in points:
        lats.append(p.latitude)
        lons.append(p.longitude)
    return {
        "min_lat": min(lats),
        "min_lon": min(lons),
        "max_lat": max(lats),
        "max_lon": max(lons),
    }
