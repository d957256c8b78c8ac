# path: trip-briefing-api/app/api/routes/markers.py

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from app.api.deps import get_store
from app.models.route_models import Marker, MarkerIn, MarkersCleared
from app.services.route_store import RouteStore

router = APIRouter(prefix="/markers", tags=["markers"])


@router.post("", response_model=Marker, status_code=201)
def add_marker(body: MarkerIn, store: RouteStore = Depends(get_store)) -> Marker:
    return Marker.model_validate(store.add_marker(body.latitude, body.longitude))


@router.get("", response_model=List[Marker])
def list_markers(store: RouteStore = Depends(get_store)) -> List[Marker]:
    return [Marker.model_validate(m) for m in store.list_markers()]


@router.delete("", response_model=MarkersCleared)
def clear_markers(store: RouteStore = Depends(get_store)) -> MarkersCleared:
    return MarkersCleared(deleted=store.clear_markers())
