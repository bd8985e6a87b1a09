"""
smartwaste.database.engine — Database Connection & Session Helper
==================================================================

Every service function opens its own :class:`~sqlalchemy.orm.Session`
from a shared :class:`~sqlalchemy.Engine` and commits once at the end, so
a failed operation never leaves a half-written report behind.

Usage::

    from smartwaste.database.engine import create_db_engine, init_db

    engine = create_db_engine()          # reads DATABASE_URL from .env
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS … + seed
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from smartwaste.database.models import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///smartwaste.db"


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine`.

    The URL comes from *url*, then the ``DATABASE_URL`` env var, then a
    local ``smartwaste.db`` SQLite file.

    SQLite connections are shared across FastAPI's worker threads, so
    ``check_same_thread`` is disabled.  Server databases get a small pool:
    * ``pool_size=5`` — five persistent connections.
    * ``max_overflow=10`` — up to 10 extra connections under load.
    * ``pool_timeout=10`` — fail after 10 s if no connection is available.
    * ``pool_recycle=3600`` — recycle connections after 1 hour.
    """
    url = url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            url,
            echo=False,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            pool_timeout=10,
            pool_recycle=3600,
        )
    logger.info("Database engine created → %s", engine.url.render_as_string(hide_password=True))
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine, *, seed: bool = True) -> None:
    """Create all tables defined in :mod:`smartwaste.database.models`.

    Safe to call on every startup.  With *seed* set, the reference data
    (neighborhoods, demo users, the starter challenge) is inserted into
    empty tables.

    .. note::

        In production the schema is managed by Alembic (``alembic upgrade
        head``).  ``create_all`` is retained for dev/test environments
        where Alembic may not have run.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")

    if seed:
        from smartwaste.database.seed import seed_reference_data

        seed_reference_data(engine)


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that auto-commits on success and rolls back
    on exception.

    Usage::

        with get_session(engine) as session:
            session.add(Neighborhood(name="RT 04"))
            # commit happens automatically on block exit
    """
    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
