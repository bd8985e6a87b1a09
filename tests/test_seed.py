"""
tests/test_seed.py — Reference Data Seeding
=============================================
"""

from __future__ import annotations

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from smartwaste.database.engine import init_db
from smartwaste.database.models import Challenge, Neighborhood, User
from smartwaste.database.seed import DEMO_USERS, seed_reference_data


def _count(engine, model) -> int:
    with Session(engine) as session:
        return session.scalar(select(func.count()).select_from(model))


def test_init_db_creates_and_seeds():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    init_db(engine)

    assert _count(engine, Neighborhood) == 3
    assert _count(engine, User) == len(DEMO_USERS)
    assert _count(engine, Challenge) == 1

    with Session(engine) as session:
        siti = session.scalar(select(User).where(User.phone == "081234567891"))
        assert siti.is_administrator
        assert siti.neighborhood.name == "RT 01"
        challenge = session.scalar(select(Challenge))
        assert challenge.points == 50


def test_seeding_is_idempotent(db_engine):
    seed_reference_data(db_engine)
    seed_reference_data(db_engine)

    assert _count(db_engine, Neighborhood) == 3
    assert _count(db_engine, Challenge) == 1


def test_existing_data_is_left_alone(db_engine, community):
    seed_reference_data(db_engine)
    assert _count(db_engine, Neighborhood) == 3
    assert _count(db_engine, User) == 6


def test_init_db_without_seed(db_engine):
    init_db(db_engine, seed=False)
    assert _count(db_engine, Neighborhood) == 0
