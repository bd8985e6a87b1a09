"""
smartwaste.database.seed — Reference Data Seeder
==================================================

Baseline rows inserted on first startup so the API is immediately usable:
three neighborhoods, one resident and one administrator in each of the
first two, and a starter challenge.

Idempotent — each group is only inserted while its table is empty, so
neighborhoods or challenges added later are never duplicated.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Engine, func, select

from smartwaste.database.engine import get_session
from smartwaste.database.models import Challenge, Neighborhood, User, UserRole

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Default catalogue
# ---------------------------------------------------------------------------
DEFAULT_NEIGHBORHOODS: tuple[str, ...] = ("RT 01", "RT 02", "RT 03")

DEMO_USERS: tuple[tuple[str, str, int, UserRole], ...] = (
    ("Budi Warga", "081234567890", 1, UserRole.RESIDENT),
    ("Siti Pengurus", "081234567891", 1, UserRole.ADMINISTRATOR),
    ("Ahmad Warga", "081234567892", 2, UserRole.RESIDENT),
    ("Rina Pengurus", "081234567893", 2, UserRole.ADMINISTRATOR),
)
"""Each entry is ``(name, phone, neighborhood position (1-based), role)``."""

STARTER_CHALLENGE = {
    "title": "Hari tanpa plastik sekali pakai",
    "description": "Usahakan tidak menggunakan plastik sekali pakai hari ini",
    "points": 50,
}


# ---------------------------------------------------------------------------
# Seeder
# ---------------------------------------------------------------------------
def seed_reference_data(engine: Engine) -> None:
    """Insert neighborhoods, demo users and the starter challenge if missing."""
    with get_session(engine) as session:
        if not session.scalar(select(func.count()).select_from(Neighborhood)):
            hoods = [Neighborhood(name=name) for name in DEFAULT_NEIGHBORHOODS]
            session.add_all(hoods)
            session.flush()
            for name, phone, position, role in DEMO_USERS:
                session.add(User(
                    name=name,
                    phone=phone,
                    neighborhood_id=hoods[position - 1].id,
                    role=role.value,
                ))
            logger.info(
                "Seeded %d neighborhoods and %d demo users.",
                len(hoods), len(DEMO_USERS),
            )

        if not session.scalar(select(func.count()).select_from(Challenge)):
            today = datetime.now(UTC).date().isoformat()
            session.add(Challenge(start_date=today, end_date=today, **STARTER_CHALLENGE))
            logger.info("Seeded starter challenge %r.", STARTER_CHALLENGE["title"])
