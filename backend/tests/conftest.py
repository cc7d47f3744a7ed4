from datetime import datetime

import pytest
import pytz
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from boattours.database import build_engine, get_db, init_db
from boattours.main import app
from boattours.models import Vessels
from boattours.services.slots import TourConfig


@pytest.fixture
def config():
    return TourConfig()


@pytest.fixture
def now():
    # 08:00 in Paris, well before the test day
    return datetime(2025, 6, 1, 6, 0, tzinfo=pytz.utc)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_vessels(session_factory):
    """Seed vessels in a short-lived session; returns their ids."""
    def _make(*capacities, status="active"):
        ids = []
        with session_factory() as session:
            for i, capacity in enumerate(capacities):
                vessel = Vessels(
                    name=f"Barque {i + 1}",
                    capacity=capacity,
                    status=status,
                    rotation_order=i,
                )
                session.add(vessel)
                session.flush()
                ids.append(vessel.id)
            session.commit()
        return ids
    return _make


@pytest.fixture
def emitted(monkeypatch):
    events = []
    monkeypatch.setattr(
        "boattours.routers.bookings.emit_event",
        lambda event_type, payload: events.append((event_type, payload)),
    )
    return events


@pytest.fixture
def client(session_factory, emitted):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
