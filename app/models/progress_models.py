# path: trip-briefing-api/app/models/progress_models.py

from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import Field

from app.models.route_models import ApiModel, Position


BriefingSource = Literal["remote", "local_model", "rules", "default"]


class Weather(ApiModel):
    temperature: float  # Fahrenheit
    condition: str
    humidity: float
    wind_speed: float  # mph


class EstimatedTime(ApiModel):
    hours: int = Field(ge=0)
    minutes: int = Field(ge=0, le=59)


class ProgressReport(ApiModel):
    route_name: str
    route_id: int
    current_location: Position
    nearest_point_index: int = Field(ge=0)
    total_points: int = Field(ge=0)
    # Distances are km strings with two decimals, the client renders them as-is.
    total_distance: str
    completed_distance: str
    remaining_distance: str
    progress_percentage: int = Field(ge=0, le=100)
    estimated_time_remaining: EstimatedTime
    weather: Weather
    timestamp: str


class Briefing(ApiModel):
    greeting: str
    progress_summary: str
    time_estimate: str
    weather_update: str
    tips: List[str]
    encouragement: str
    source: BriefingSource = "rules"


class BriefingRequest(ApiModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    route_id: Optional[int] = None
    # None means "check connectivity once before picking a provider".
    online: Optional[bool] = None

    def position(self) -> Optional[Position]:
        if self.latitude is None or self.longitude is None:
            return None
        return Position(latitude=self.latitude, longitude=self.longitude)


class BriefingResponse(ApiModel):
    report: ProgressReport
    briefing: Briefing
