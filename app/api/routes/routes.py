# path: trip-briefing-api/app/api/routes/routes.py

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.deps import get_store, get_weather_source
from app.models.progress_models import ProgressReport
from app.models.route_models import (
    BBox,
    Position,
    Route,
    RouteCreate,
    RouteDetail,
    RouteFromMarkers,
    Waypoint,
)
from app.services.progress_engine import compute_progress
from app.services.route_store import RouteNotFound, RouteStore
from app.services.weather import StaticWeatherSource
from app.utils.geo import bbox, polyline_length_km

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("", response_model=Route, status_code=201)
def create_route(body: RouteCreate, store: RouteStore = Depends(get_store)) -> Route:
    try:
        route = store.create_route(body.name, body.points)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Route.model_validate(route)


@router.post("/from-markers", response_model=Route, status_code=201)
def create_route_from_markers(body: RouteFromMarkers, store: RouteStore = Depends(get_store)) -> Route:
    try:
        route = store.create_route_from_markers(body.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Route.model_validate(route)


@router.get("", response_model=List[Route])
def list_routes(store: RouteStore = Depends(get_store)) -> List[Route]:
    return [Route.model_validate(r) for r in store.list_routes()]


@router.get("/{route_id}", response_model=RouteDetail)
def get_route(route_id: int, store: RouteStore = Depends(get_store)) -> RouteDetail:
    try:
        route = store.get_route(route_id)
    except RouteNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    points = store.list_route_points(route_id)
    return RouteDetail(
        id=route.id,
        name=route.name,
        created_at=route.created_at,
        total_distance_km=round(polyline_length_km(points), 3),
        point_count=len(points),
        bbox=BBox(**bbox(points)) if points else None,
        points=[Waypoint.model_validate(p) for p in points],
    )


@router.delete("/{route_id}", status_code=204)
def delete_route(route_id: int, store: RouteStore = Depends(get_store)) -> Response:
    try:
        store.delete_route(route_id)
    except RouteNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.post("/{route_id}/progress", response_model=ProgressReport)
def route_progress(
    route_id: int,
    position: Position,
    store: RouteStore = Depends(get_store),
    weather: StaticWeatherSource = Depends(get_weather_source),
) -> ProgressReport:
    try:
        route = store.get_route(route_id)
    except RouteNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    points = store.list_route_points(route_id)
    return compute_progress(position, route, points, weather=weather.current())
