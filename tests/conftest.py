import os

# app.main builds a module-level app on import; keep it off the working directory.
os.environ.setdefault("TRIP_BRIEFING_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.session import init_db, make_engine, make_session_factory
from app.models.route_models import Position, RoutePointIn
from app.services.route_store import RouteStore


SF_POINTS = [
    (37.7749, -122.4194),
    (37.7850, -122.4300),
    (37.7900, -122.4150),
]


def positions(coords=SF_POINTS):
    return [Position(latitude=lat, longitude=lon) for lat, lon in coords]


def route_points(coords=SF_POINTS):
    return [RoutePointIn(latitude=lat, longitude=lon) for lat, lon in coords]


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'store.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = make_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def store(session):
    ticks = iter(range(1_000, 10**12, 1_000))
    return RouteStore(session, clock=lambda: next(ticks))


@pytest.fixture
def app(tmp_path):
    from app.main import create_app

    return create_app(Settings(database_url=f"sqlite:///{tmp_path / 'api.db'}"))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
