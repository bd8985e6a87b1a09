"""
smartwaste.services.approval_service — Administrator Review of Reports
========================================================================

Authorization is neighborhood-scoped: an administrator (pengurus) may only
list or decide reports belonging to their own neighborhood, whatever
their role elsewhere.

Every decision follows the pattern:
  1. Load the report                       → ReportNotFound
  2. Check the administrator's scope       → NotAuthorized
  3. Compute the transition                → AlreadyDecided
  4. Conditional UPDATE … WHERE status = 'pending'
  5. Commit
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session, with_polymorphic

from smartwaste.database.models import (
    ChallengeAward,
    Report,
    ReportStatus,
    User,
    UserReport,
    UserRole,
    UserStatus,
)
from smartwaste.engine.lifecycle import ReviewAction, next_status, parse_action
from smartwaste.errors import AlreadyDecided, NotAuthorized, ReportNotFound

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DecisionResult:
    report_id: int
    status: str


@dataclass(frozen=True, slots=True)
class PendingReport:
    """A pending row as shown to the reviewing administrator."""

    id: int
    kind: str
    user_id: int | None
    user_name: str | None
    neighborhood_id: int
    date: str
    organic: float | None
    plastic: float | None
    electronic: float | None
    other: float | None
    points: int
    status: str
    challenge_id: int | None
    created_at: datetime | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "rt_id": self.neighborhood_id,
            "date": self.date,
            "organic": self.organic,
            "plastic": self.plastic,
            "electronic": self.electronic,
            "other": self.other,
            "points": self.points,
            "status": self.status,
            "challenge_id": self.challenge_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def get_neighborhood_admin(
    session: Session, administrator_id: int, neighborhood_id: int
) -> User | None:
    """Return the active administrator of *neighborhood_id*, if that is who this is."""
    return session.scalar(
        select(User).where(
            User.id == administrator_id,
            User.role == UserRole.ADMINISTRATOR.value,
            User.status == UserStatus.ACTIVE.value,
            User.neighborhood_id == neighborhood_id,
        )
    )


def _require_admin(session: Session, administrator_id: int, neighborhood_id: int) -> User:
    admin = get_neighborhood_admin(session, administrator_id, neighborhood_id)
    if admin is None:
        logger.warning(
            "User %s denied review access to neighborhood %s",
            administrator_id, neighborhood_id,
        )
        raise NotAuthorized()
    return admin


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
def decide_report(
    engine: Engine,
    *,
    report_id: int,
    administrator_id: int,
    action: str | ReviewAction,
) -> DecisionResult:
    """Approve or reject a pending report and record the verifier.

    Re-deciding is refused with :class:`AlreadyDecided`.  The UPDATE is
    guarded on ``status = 'pending'`` so that of two concurrent decisions
    only one can succeed.
    """
    review = parse_action(action)

    with Session(engine) as session:
        report = session.get(Report, report_id)
        if report is None:
            raise ReportNotFound()

        _require_admin(session, administrator_id, report.neighborhood_id)
        target = next_status(report.status, review)

        result = session.execute(
            update(Report)
            .where(Report.id == report_id, Report.status == ReportStatus.PENDING.value)
            .values(status=target.value, verified_by=administrator_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise AlreadyDecided()
        session.commit()

    logger.info("Report %d %s by administrator %d", report_id, target.value, administrator_id)
    return DecisionResult(report_id=report_id, status=target.value)


def _pending_view(report: Report, user_names: dict[int, str]) -> PendingReport:
    if isinstance(report, UserReport):
        user_id = report.user_id
        quantities = (report.organic, report.plastic, report.electronic, report.other)
        challenge_id = None
    else:
        user_id = None
        quantities = (None, None, None, None)
        challenge_id = report.challenge_id
    organic, plastic, electronic, other = quantities
    return PendingReport(
        id=report.id,
        kind=report.kind,
        user_id=user_id,
        user_name=user_names.get(user_id) if user_id is not None else None,
        neighborhood_id=report.neighborhood_id,
        date=report.date,
        organic=organic,
        plastic=plastic,
        electronic=electronic,
        other=other,
        points=report.points,
        status=report.status,
        challenge_id=challenge_id,
        created_at=report.created_at,
    )


def list_pending_reports(
    engine: Engine,
    *,
    neighborhood_id: int,
    administrator_id: int,
) -> list[PendingReport]:
    """Pending reports of one neighborhood, newest first.

    Includes challenge awards (which have no reporting user).
    """
    with Session(engine) as session:
        _require_admin(session, administrator_id, neighborhood_id)

        any_kind = with_polymorphic(Report, [UserReport, ChallengeAward])
        reports = session.scalars(
            select(any_kind)
            .where(
                any_kind.neighborhood_id == neighborhood_id,
                any_kind.status == ReportStatus.PENDING.value,
            )
            .order_by(any_kind.created_at.desc(), any_kind.id.desc())
        ).all()

        user_ids = {r.user_id for r in reports if isinstance(r, UserReport)}
        user_names = dict(
            session.execute(select(User.id, User.name).where(User.id.in_(user_ids))).all()
        ) if user_ids else {}

        return [_pending_view(r, user_names) for r in reports]
