"""
smartwaste.services.report_service — Report Submission & Challenge Awards
===========================================================================

Shared service module callable by the API and by scripts.

Submission rules, checked in order:
  1. The user exists and is active          → UserNotFound
  2. No report yet for (user, date)          → DuplicateReport
  3. Every category within [0, 50]          → InvalidInput / QuantityExceedsLimit

The duplicate pre-check gives a clean error on the common path; the
``uq_reports_user_date`` constraint is what actually guarantees a single
report per day when two submissions race.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smartwaste.constants import DAILY_QUANTITY_CAP
from smartwaste.database.models import (
    Challenge,
    ChallengeAward,
    Neighborhood,
    ReportStatus,
    User,
    UserReport,
)
from smartwaste.engine.scoring import Quantities, compute_points
from smartwaste.errors import (
    ChallengeNotFound,
    DuplicateReport,
    InvalidInput,
    NeighborhoodNotFound,
    QuantityExceedsLimit,
    UserNotFound,
)

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    id: int
    points: int
    status: str


@dataclass(frozen=True, slots=True)
class AwardResult:
    id: int
    awarded_points: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def today_utc() -> date:
    return datetime.now(UTC).date()


def resolve_report_date(value: date | str | None, *, today: date | None = None) -> str:
    """Normalize *value* to a ``YYYY-MM-DD`` string, defaulting to today."""
    if value is None or value == "":
        return (today or today_utc()).isoformat()
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(value).isoformat()
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid date {value!r}; expected YYYY-MM-DD") from None


def validate_quantities(quantities: Quantities) -> None:
    """Raise if any category is negative, not a number, or above the daily cap."""
    for category, qty in quantities.items():
        if not math.isfinite(qty) or qty < 0:
            raise InvalidInput(f"{category} must be a non-negative number")
    over = [c for c, qty in quantities.items() if qty > DAILY_QUANTITY_CAP]
    if over:
        raise QuantityExceedsLimit(
            f"Daily limit exceeded (max {DAILY_QUANTITY_CAP}kg per category): "
            + ", ".join(over)
        )


def get_active_user(session: Session, user_id: int) -> User | None:
    user = session.get(User, user_id)
    return user if user is not None and user.is_active else None


def find_existing_report(session: Session, user_id: int, day: str) -> int | None:
    """Id of the report *user_id* already filed for *day*, if any."""
    return session.scalar(
        select(UserReport.id).where(UserReport.user_id == user_id, UserReport.date == day)
    )


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
def submit_report(
    engine: Engine,
    *,
    user_id: int,
    quantities: Quantities | dict[str, Any] | None = None,
    report_date: date | str | None = None,
    today: date | None = None,
) -> SubmissionResult:
    """Record a resident's daily report in ``pending`` state.

    Points are computed once here and never recomputed.  The report
    inherits the user's neighborhood.
    """
    if not isinstance(quantities, Quantities):
        quantities = Quantities.from_mapping(quantities)
    day = resolve_report_date(report_date, today=today)

    with Session(engine) as session:
        user = get_active_user(session, user_id)
        if user is None:
            raise UserNotFound()

        if find_existing_report(session, user_id, day) is not None:
            raise DuplicateReport()

        validate_quantities(quantities)

        points = compute_points(
            quantities.organic,
            quantities.plastic,
            quantities.electronic,
            quantities.other,
        )
        report = UserReport(
            user_id=user.id,
            neighborhood_id=user.neighborhood_id,
            date=day,
            organic=quantities.organic,
            plastic=quantities.plastic,
            electronic=quantities.electronic,
            other=quantities.other,
            points=points,
            status=ReportStatus.PENDING.value,
        )
        session.add(report)
        try:
            session.flush()
        except IntegrityError:
            # A concurrent submission won the race for (user, date).
            session.rollback()
            raise DuplicateReport() from None

        report_id = report.id
        session.commit()

    logger.info(
        "Report %d submitted by user %d for %s (%d points)",
        report_id, user_id, day, points,
    )
    return SubmissionResult(id=report_id, points=points, status=ReportStatus.PENDING.value)


def complete_challenge(
    engine: Engine,
    *,
    neighborhood_id: int,
    challenge_id: int,
    today: date | None = None,
) -> AwardResult:
    """Award a challenge's points to a neighborhood.

    The award is neighborhood-level, so it is not subject to the per-user
    daily limit.  It starts ``pending`` like any other report and only
    reaches the leaderboard once an administrator approves it.
    """
    with Session(engine) as session:
        challenge = session.get(Challenge, challenge_id)
        if challenge is None:
            raise ChallengeNotFound()
        if session.get(Neighborhood, neighborhood_id) is None:
            raise NeighborhoodNotFound()

        award = ChallengeAward(
            neighborhood_id=neighborhood_id,
            challenge_id=challenge.id,
            date=(today or today_utc()).isoformat(),
            points=challenge.points,
            status=ReportStatus.PENDING.value,
        )
        session.add(award)
        session.flush()
        result = AwardResult(id=award.id, awarded_points=challenge.points)
        session.commit()

    logger.info(
        "Challenge %d completed by neighborhood %d (award %d, %d points)",
        challenge_id, neighborhood_id, result.id, result.awarded_points,
    )
    return result
