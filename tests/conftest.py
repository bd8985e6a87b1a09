"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from smartwaste.database.models import (
    Base,
    Challenge,
    Neighborhood,
    User,
    UserRole,
    UserStatus,
)


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all SmartWaste tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` in the rate limiter and by
    FastAPI's threadpool for sync routes).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine):
    """Provide a session that rolls back after each test."""
    with Session(db_engine) as session:
        yield session
        session.rollback()


@pytest.fixture
def community(db_engine: Engine) -> dict[str, int]:
    """Two neighborhoods, each with a resident and an administrator, plus
    an inactive resident, a neighborhood with nobody in it, and a challenge.

    Returns a name → id mapping.
    """
    with Session(db_engine) as session:
        rt1 = Neighborhood(name="RT 01")
        rt2 = Neighborhood(name="RT 02")
        rt3 = Neighborhood(name="RT 03")
        session.add_all([rt1, rt2, rt3])
        session.flush()

        budi = User(name="Budi", phone="0811", neighborhood_id=rt1.id)
        siti = User(
            name="Siti", phone="0812", neighborhood_id=rt1.id,
            role=UserRole.ADMINISTRATOR.value,
        )
        ahmad = User(name="Ahmad", phone="0813", neighborhood_id=rt2.id)
        rina = User(
            name="Rina", phone="0814", neighborhood_id=rt2.id,
            role=UserRole.ADMINISTRATOR.value,
        )
        dewi = User(
            name="Dewi", phone="0815", neighborhood_id=rt1.id,
            status=UserStatus.INACTIVE.value,
        )
        joko = User(
            name="Joko", phone="0816", neighborhood_id=rt1.id,
            role=UserRole.ADMINISTRATOR.value, status=UserStatus.INACTIVE.value,
        )
        challenge = Challenge(
            title="Hari tanpa plastik", description="Tanpa plastik", points=50,
            start_date="2026-10-18", end_date="2026-10-18",
        )
        session.add_all([budi, siti, ahmad, rina, dewi, joko, challenge])
        session.commit()

        return {
            "rt1": rt1.id,
            "rt2": rt2.id,
            "rt3": rt3.id,
            "budi": budi.id,
            "siti": siti.id,
            "ahmad": ahmad.id,
            "rina": rina.id,
            "dewi": dewi.id,
            "joko": joko.id,
            "challenge": challenge.id,
        }


@pytest.fixture
def client(db_engine: Engine):
    """FastAPI TestClient bound to the in-memory engine.

    The lifespan hook is not run (no ``with`` block), so the engine
    dependency is overridden and the rate limiter configured by hand.
    """
    from fastapi.testclient import TestClient

    from smartwaste.api.deps import get_engine
    from smartwaste.api.main import app
    from smartwaste.api.rate_limit import configure_rate_limiter

    configure_rate_limiter(engine=db_engine, max_requests=1000, window_seconds=60)
    app.dependency_overrides[get_engine] = lambda: db_engine
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
