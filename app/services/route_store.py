# path: trip-briefing-api/app/services/route_store.py

from __future__ import annotations

from typing import Iterable, List, Optional
import logging
import time

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.db.models import MarkerRow, RoutePointRow, RouteRow
from app.models.route_models import RoutePointIn

logger = logging.getLogger(__name__)


MIN_ROUTE_POINTS = 2


class RouteNotFound(LookupError):
    def __init__(self, route_id: int):
        super().__init__(f"Route {route_id} not found")
        self.route_id = route_id


MS_PER_DAY = 86_400_000


def now_ms() -> int:
    return int(time.time() * 1000)


def days_since(created_at_ms: int, now: Optional[int] = None) -> int:
    elapsed = (now_ms() if now is None else now) - created_at_ms
    return max(0, elapsed // MS_PER_DAY)


class RouteStore:
    """Create/read/delete over markers, routes and route points for one session."""

    def __init__(self, session: Session, clock=now_ms):
        self.session = session
        self._clock = clock

    # Markers

    def add_marker(self, latitude: float, longitude: float) -> MarkerRow:
        marker = MarkerRow(latitude=latitude, longitude=longitude)
        self.session.add(marker)
        self.session.commit()
        return marker

    def list_markers(self) -> List[MarkerRow]:
        return list(self.session.scalars(select(MarkerRow).order_by(MarkerRow.id)))

    def clear_markers(self) -> int:
        result = self.session.execute(delete(MarkerRow))
        self.session.commit()
        # Route points pointing at the markers were nulled by the database.
        self.session.expire_all()
        return result.rowcount or 0

    # Routes

    def create_route(self, name: str, points: Iterable[RoutePointIn]) -> RouteRow:
        name = (name or "").strip()
        points = list(points)
        if not name:
            raise ValueError("Route name must not be empty")
        if len(points) < MIN_ROUTE_POINTS:
            raise ValueError(f"A route needs at least {MIN_ROUTE_POINTS} points, got {len(points)}")

        route = RouteRow(name=name, created_at=self._clock())
        for seq, p in enumerate(points):
            route.points.append(
                RoutePointRow(
                    marker_id=p.marker_id,
                    sequence=seq,
                    latitude=p.latitude,
                    longitude=p.longitude,
                )
            )
        self.session.add(route)
        self.session.commit()
        logger.info("Created route %s '%s' with %d points", route.id, route.name, len(points))
        return route

    def create_route_from_markers(self, name: str) -> RouteRow:
        markers = self.list_markers()
        points = [
            RoutePointIn(marker_id=m.id, latitude=m.latitude, longitude=m.longitude)
            for m in markers
        ]
        route = self.create_route(name, points)
        self.clear_markers()
        return route

    def list_routes(self) -> List[RouteRow]:
        stmt = select(RouteRow).order_by(RouteRow.created_at.desc(), RouteRow.id.desc())
        return list(self.session.scalars(stmt))

    def most_recent_route(self) -> Optional[RouteRow]:
        stmt = select(RouteRow).order_by(RouteRow.created_at.desc(), RouteRow.id.desc()).limit(1)
        return self.session.scalars(stmt).first()

    def get_route(self, route_id: int) -> RouteRow:
        route = self.session.get(RouteRow, route_id)
        if route is None:
            raise RouteNotFound(route_id)
        return route

    def list_route_points(self, route_id: int) -> List[RoutePointRow]:
        stmt = (
            select(RoutePointRow)
            .where(RoutePointRow.route_id == route_id)
            .order_by(RoutePointRow.sequence)
        )
        return list(self.session.scalars(stmt))

    def delete_route(self, route_id: int) -> None:
        route = self.get_route(route_id)
        self.session.delete(route)
        self.session.commit()
        logger.info("Deleted route %s", route_id)
