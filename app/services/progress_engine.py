# path: trip-briefing-api/app/services/progress_engine.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, NamedTuple, Optional, Sequence
import logging
import math

from app.models.progress_models import EstimatedTime, ProgressReport, Weather
from app.models.route_models import Position, RouteRef
from app.services.weather import DEFAULT_WEATHER
from app.utils.geo import LatLon, great_circle_distance_km, polyline_length_km

logger = logging.getLogger(__name__)


WALKING_SPEED_KMH = 5.0
SNAP_RADIUS_KM = 0.05
ZERO_DISTANCE_KM = 1e-9

DEMO_ROUTE_ID = 999
DEMO_ROUTE_NAME = "Demo Route"
DEMO_LOCATION = Position(latitude=37.7749, longitude=-122.4194)
DEMO_ROUTE = RouteRef(id=DEMO_ROUTE_ID, name=DEMO_ROUTE_NAME)
DEMO_WAYPOINTS = (
    Position(latitude=37.7749, longitude=-122.4194),
    Position(latitude=37.7850, longitude=-122.4300),
    Position(latitude=37.7900, longitude=-122.4150),
)

# Placeholder numbers shown when there is not enough live data to compute progress.
FALLBACK_NEAREST_INDEX = 1
FALLBACK_TOTAL_POINTS = 3
FALLBACK_TOTAL_KM = "5.20"
FALLBACK_COMPLETED_KM = "2.10"
FALLBACK_REMAINING_KM = "3.10"
FALLBACK_PERCENTAGE = 40
FALLBACK_ETA = EstimatedTime(hours=0, minutes=37)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _iso_timestamp(now: Optional[datetime]) -> str:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _km(value: float) -> str:
    return f"{value:.2f}"


def find_nearest_waypoint_index(position: LatLon, waypoints: Sequence[LatLon]) -> int:
    if not waypoints:
        raise ValueError("find_nearest_waypoint_index needs at least one waypoint")

    nearest = 0
    best = math.inf
    for i, wp in enumerate(waypoints):
        d = great_circle_distance_km(position, wp)
        # Strict < keeps the lowest index on exact ties.
        if d < best:
            best = d
            nearest = i
    return nearest


def estimate_time_remaining(remaining_km: float, speed_kmh: float = WALKING_SPEED_KMH) -> EstimatedTime:
    estimated_hours = max(0.0, remaining_km) / speed_kmh
    hours = int(math.floor(estimated_hours))
    minutes = _round_half_up((estimated_hours - hours) * 60)
    if minutes >= 60:
        hours += 1
        minutes = 0
    return EstimatedTime(hours=hours, minutes=minutes)


def progress_percentage(completed_km: float, total_km: float) -> int:
    if total_km <= ZERO_DISTANCE_KM:
        return 0
    pct = _round_half_up(100 * completed_km / total_km)
    return max(0, min(100, pct))


class RouteMeasure(NamedTuple):
    nearest_index: int
    total_km: float
    completed_km: float
    remaining_km: float


def measure_route(position: LatLon, waypoints: Sequence[LatLon]) -> RouteMeasure:
    nearest_idx = find_nearest_waypoint_index(position, waypoints)

    total_km = polyline_length_km(waypoints)
    completed_km = polyline_length_km(waypoints, end=nearest_idx)

    # Within 50 m of the nearest waypoint: completed distance is the polyline up to that waypoint.
    # TODO: interpolate along the segment (nearest_idx - 1, nearest_idx) when further away.
    if nearest_idx > 0:
        to_nearest_km = great_circle_distance_km(position, waypoints[nearest_idx])
        if to_nearest_km <= SNAP_RADIUS_KM:
            completed_km = polyline_length_km(waypoints, end=nearest_idx)

    return RouteMeasure(nearest_idx, total_km, completed_km, total_km - completed_km)


def fallback_report(
    position: Optional[LatLon],
    route: Any,
    waypoints: Optional[Sequence[LatLon]],
    weather: Optional[Weather] = None,
    now: Optional[datetime] = None,
) -> ProgressReport:
    location = DEMO_LOCATION.model_copy()
    if position is not None:
        location = Position(latitude=position.latitude, longitude=position.longitude)

    return ProgressReport(
        route_name=getattr(route, "name", None) or DEMO_ROUTE_NAME,
        route_id=getattr(route, "id", None) or DEMO_ROUTE_ID,
        current_location=location,
        nearest_point_index=FALLBACK_NEAREST_INDEX,
        total_points=len(waypoints or []) or FALLBACK_TOTAL_POINTS,
        total_distance=FALLBACK_TOTAL_KM,
        completed_distance=FALLBACK_COMPLETED_KM,
        remaining_distance=FALLBACK_REMAINING_KM,
        progress_percentage=FALLBACK_PERCENTAGE,
        estimated_time_remaining=FALLBACK_ETA.model_copy(),
        weather=(weather or DEFAULT_WEATHER).model_copy(),
        timestamp=_iso_timestamp(now),
    )


def compute_progress(
    position: Optional[LatLon],
    route: Any,
    waypoints: Optional[Sequence[LatLon]],
    weather: Optional[Weather] = None,
    now: Optional[datetime] = None,
) -> ProgressReport:
    """
    Where the walker is along a route: nearest waypoint, polyline distances,
    percentage and time left at walking pace.

    Never raises. Missing position/route or fewer than two waypoints yield the
    fixed placeholder report so the client always has something to show.
    """
    if position is None or route is None or not waypoints or len(waypoints) < 2:
        logger.debug("Not enough data for progress, returning placeholder report")
        return fallback_report(position, route, waypoints, weather, now)

    nearest_idx, total_km, completed_km, remaining_km = measure_route(position, waypoints)

    return ProgressReport(
        route_name=route.name,
        route_id=route.id,
        current_location=Position(latitude=position.latitude, longitude=position.longitude),
        nearest_point_index=nearest_idx,
        total_points=len(waypoints),
        total_distance=_km(total_km),
        completed_distance=_km(completed_km),
        remaining_distance=_km(remaining_km),
        progress_percentage=progress_percentage(completed_km, total_km),
        estimated_time_remaining=estimate_time_remaining(remaining_km),
        weather=(weather or DEFAULT_WEATHER).model_copy(),
        timestamp=_iso_timestamp(now),
    )
