# path: trip-briefing-api/app/api/routes/briefing.py

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_briefing_service, get_store, get_weather_source
from app.models.progress_models import BriefingRequest, BriefingResponse
from app.services.briefing_providers import BriefingService
from app.services.progress_engine import DEMO_ROUTE, DEMO_WAYPOINTS, compute_progress
from app.services.route_store import RouteNotFound, RouteStore, days_since
from app.services.weather import StaticWeatherSource

router = APIRouter(tags=["briefing"])


@router.post("/briefing", response_model=BriefingResponse)
def daily_briefing(
    body: BriefingRequest,
    store: RouteStore = Depends(get_store),
    service: BriefingService = Depends(get_briefing_service),
    weather: StaticWeatherSource = Depends(get_weather_source),
) -> BriefingResponse:
    if body.route_id is not None:
        try:
            route = store.get_route(body.route_id)
        except RouteNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
    else:
        route = store.most_recent_route()

    if route is None:
        # Nothing saved yet: brief against the built-in demo route.
        route, points, days = DEMO_ROUTE, list(DEMO_WAYPOINTS), 0
    else:
        points, days = store.list_route_points(route.id), days_since(route.created_at)

    report = compute_progress(body.position(), route, points, weather=weather.current())
    briefing = service.get_briefing(report, online=body.online, days_traveled=days)
    return BriefingResponse(report=report, briefing=briefing)
