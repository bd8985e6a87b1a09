"""
smartwaste.config — YAML Configuration Loader
===============================================

This module reads ``config.yaml`` for **soft** settings (community name,
API port, request budget, demo seeding).  Secrets and connection strings
such as ``DATABASE_URL`` come from the environment / ``.env`` instead.

The scoring rules (weights, daily cap) are deliberately *not* here: they
are fixed in :mod:`smartwaste.constants` so that stored points stay
comparable over time.

Usage::

    from smartwaste.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.community_name)    # "Kampung Bersih"
    print(cfg.api_port)          # 4000
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class SmartWasteConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    community_name: str

    # API
    api_port: int

    # Request throttle (per client IP, sliding window)
    rate_limit_requests: int = 30
    rate_limit_window_seconds: int = 60

    # Insert demo neighborhoods / users / challenge into an empty database
    seed_reference_data: bool = True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path | None = None) -> SmartWasteConfig:
    """Read *path* and return a :class:`SmartWasteConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.  Defaults to the
        ``SMARTWASTE_CONFIG`` env var, then ``config.yaml`` in the current
        working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path or os.getenv("SMARTWASTE_CONFIG", "config.yaml"))
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return SmartWasteConfig(
        community_name=raw["community_name"],
        api_port=int(raw["api_port"]),
        rate_limit_requests=int(raw.get("rate_limit_requests", 30)),
        rate_limit_window_seconds=int(raw.get("rate_limit_window_seconds", 60)),
        seed_reference_data=bool(raw.get("seed_reference_data", True)),
    )
