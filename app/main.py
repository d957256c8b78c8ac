# path: trip-briefing-api/app/main.py

from __future__ import annotations

from typing import Optional
import logging

from fastapi import FastAPI

from app.api.routes.briefing import router as briefing_router
from app.api.routes.markers import router as markers_router
from app.api.routes.routes import router as routes_router
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.db.session import init_db, make_engine, make_session_factory
from app.services.briefing_providers import (
    BriefingService,
    HTTPModelRuntime,
    LocalModelProvider,
    RemoteHTTPProvider,
)
from app.services.weather import StaticWeatherSource

logger = logging.getLogger(__name__)


def build_briefing_service(settings: Settings) -> BriefingService:
    remote = None
    if settings.briefing_endpoint:
        remote = RemoteHTTPProvider(settings.briefing_endpoint, timeout=settings.http_timeout_s)

    local_model = None
    if settings.local_model_url:
        runtime = HTTPModelRuntime(
            settings.local_model_url,
            settings.local_model_name,
            timeout=settings.http_timeout_s,
        )
        local_model = LocalModelProvider(runtime)

    return BriefingService(remote=remote, local_model=local_model)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    engine = make_engine(settings.database_url)
    init_db(engine)

    app = FastAPI(title="trip-briefing-api")
    app.state.settings = settings
    app.state.session_factory = make_session_factory(engine)
    app.state.briefing_service = build_briefing_service(settings)
    app.state.weather_source = StaticWeatherSource()

    app.include_router(markers_router)
    app.include_router(routes_router)
    app.include_router(briefing_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    logger.info(
        "trip-briefing-api ready (remote briefing: %s, local model: %s)",
        settings.briefing_endpoint or "off",
        settings.local_model_url or "off",
    )
    return app


app = create_app()
