# path: trip-briefing-api/app/models/route_models.py

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    # JSON is camelCase for the mobile client, attributes stay snake_case.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Position(ApiModel):
    latitude: float
    longitude: float


class MarkerIn(Position):
    pass


class Marker(ApiModel):
    id: int
    latitude: float
    longitude: float


class RoutePointIn(ApiModel):
    marker_id: Optional[int] = None
    latitude: float
    longitude: float


class RouteCreate(ApiModel):
    # Length and point-count rules are enforced by the store (-> 400).
    name: str = Field(max_length=80)
    points: List[RoutePointIn]


class RouteFromMarkers(ApiModel):
    name: str = Field(max_length=80)


class RouteRef(ApiModel):
    id: int
    name: str


class Route(RouteRef):
    created_at: int = Field(description="epoch milliseconds")


class Waypoint(ApiModel):
    id: int
    route_id: int
    marker_id: Optional[int] = None
    sequence: int = Field(ge=0)
    latitude: float
    longitude: float


class BBox(ApiModel):
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float


class RouteDetail(Route):
    total_distance_km: float = Field(ge=0)
    point_count: int = Field(ge=0)
    bbox: Optional[BBox] = None
    points: List[Waypoint]


class MarkersCleared(ApiModel):
    deleted: int = Field(ge=0)
