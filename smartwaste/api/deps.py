"""
smartwaste.api.deps — FastAPI dependency injection
====================================================
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import Engine

from smartwaste.config import SmartWasteConfig, load_config
from smartwaste.database.engine import create_db_engine


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> SmartWasteConfig:
    return load_config()


def client_id(host: str | None) -> str:
    """Key used to attribute requests to a caller (its IP address)."""
    return host or "unknown"
