# path: trip-briefing-api/app/api/deps.py

from __future__ import annotations

from typing import Iterator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.services.briefing_providers import BriefingService
from app.services.route_store import RouteStore
from app.services.weather import StaticWeatherSource


def get_db(request: Request) -> Iterator[Session]:
    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_store(db: Session = Depends(get_db)) -> RouteStore:
    return RouteStore(db)


def get_briefing_service(request: Request) -> BriefingService:
    return request.app.state.briefing_service


def get_weather_source(request: Request) -> StaticWeatherSource:
    return request.app.state.weather_source
