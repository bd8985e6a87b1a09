"""
smartwaste.services.leaderboard_service — Neighborhood Leaderboard
====================================================================

One aggregate query over ``neighborhoods LEFT JOIN reports``.  Only
``approved`` reports contribute points; every neighborhood is listed,
including those with no reports at all.  No caching — each call reflects
every committed decision.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from smartwaste.database.models import Neighborhood, Report, ReportStatus

if TYPE_CHECKING:
    from sqlalchemy import Engine


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    neighborhood_id: int
    name: str
    total_points: int
    approved_count: int
    pending_count: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def compute_leaderboard(engine: Engine) -> list[LeaderboardEntry]:
    """Rank neighborhoods by approved points.

    Ties are broken by neighborhood id ascending so the order is stable.
    """
    approved = Report.status == ReportStatus.APPROVED.value
    pending = Report.status == ReportStatus.PENDING.value

    total_points = func.coalesce(
        func.sum(case((approved, Report.points), else_=0)), 0
    ).label("total_points")

    query = (
        select(
            Neighborhood.id,
            Neighborhood.name,
            total_points,
            func.count(case((approved, 1))).label("approved_count"),
            func.count(case((pending, 1))).label("pending_count"),
        )
        .select_from(Neighborhood)
        .outerjoin(Report, Report.neighborhood_id == Neighborhood.id)
        .group_by(Neighborhood.id, Neighborhood.name)
        .order_by(total_points.desc(), Neighborhood.id.asc())
    )

    with Session(engine) as session:
        rows = session.execute(query).all()

    return [
        LeaderboardEntry(
            neighborhood_id=row.id,
            name=row.name,
            total_points=int(row.total_points or 0),
            approved_count=row.approved_count,
            pending_count=row.pending_count,
        )
        for row in rows
    ]
