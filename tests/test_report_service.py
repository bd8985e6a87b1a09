"""
tests/test_report_service.py — Report Submission & Challenge Awards
=====================================================================

Uses an in-memory SQLite database via the shared conftest fixtures.
"""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from smartwaste.database.models import ChallengeAward, Report, UserReport
from smartwaste.engine.scoring import Quantities
from smartwaste.errors import (
    ChallengeNotFound,
    Conflict,
    DuplicateReport,
    InvalidInput,
    LimitExceeded,
    NeighborhoodNotFound,
    QuantityExceedsLimit,
    UserNotFound,
)
from smartwaste.services import report_service

DAY = date(2026, 10, 18)


def _count_reports(engine) -> int:
    with Session(engine) as session:
        return session.scalar(select(func.count()).select_from(Report))


class TestSubmitReport:
    def test_documented_scenario(self, db_engine, community):
        result = report_service.submit_report(
            db_engine,
            user_id=community["budi"],
            quantities={"organic": 10, "plastic": 5, "electronic": 0, "other": 0},
            today=DAY,
        )
        assert result.points == 6
        assert result.status == "pending"

        with Session(db_engine) as session:
            report = session.get(Report, result.id)
            assert isinstance(report, UserReport)
            assert report.neighborhood_id == community["rt1"]
            assert report.date == "2026-10-18"
            assert report.organic == 10
            assert report.verified_by is None

    def test_explicit_date_string(self, db_engine, community):
        result = report_service.submit_report(
            db_engine, user_id=community["budi"], report_date="2026-01-02",
            quantities=Quantities(organic=1),
        )
        with Session(db_engine) as session:
            assert session.get(Report, result.id).date == "2026-01-02"

    def test_bad_date_string(self, db_engine, community):
        with pytest.raises(InvalidInput):
            report_service.submit_report(
                db_engine, user_id=community["budi"], report_date="18/10/2026",
            )

    def test_unknown_user(self, db_engine, community):
        with pytest.raises(UserNotFound):
            report_service.submit_report(db_engine, user_id=9999, today=DAY)

    def test_inactive_user(self, db_engine, community):
        with pytest.raises(UserNotFound):
            report_service.submit_report(db_engine, user_id=community["dewi"], today=DAY)

    def test_second_report_same_day_conflicts(self, db_engine, community):
        report_service.submit_report(
            db_engine, user_id=community["budi"], quantities={"plastic": 1}, today=DAY,
        )
        with pytest.raises(DuplicateReport) as exc_info:
            report_service.submit_report(
                db_engine, user_id=community["budi"], quantities={"plastic": 2}, today=DAY,
            )
        assert isinstance(exc_info.value, Conflict)
        assert _count_reports(db_engine) == 1

    def test_next_day_is_allowed(self, db_engine, community):
        report_service.submit_report(db_engine, user_id=community["budi"], today=DAY)
        report_service.submit_report(
            db_engine, user_id=community["budi"], report_date=date(2026, 10, 19),
        )
        assert _count_reports(db_engine) == 2

    def test_other_users_same_day_are_independent(self, db_engine, community):
        report_service.submit_report(db_engine, user_id=community["budi"], today=DAY)
        report_service.submit_report(db_engine, user_id=community["ahmad"], today=DAY)
        assert _count_reports(db_engine) == 2

    @pytest.mark.parametrize("category", ["organic", "plastic", "electronic", "other"])
    def test_any_category_over_cap(self, db_engine, community, category):
        with pytest.raises(QuantityExceedsLimit) as exc_info:
            report_service.submit_report(
                db_engine,
                user_id=community["budi"],
                quantities={category: 51},
                today=DAY,
            )
        assert isinstance(exc_info.value, LimitExceeded)
        assert _count_reports(db_engine) == 0

    def test_cap_is_inclusive(self, db_engine, community):
        result = report_service.submit_report(
            db_engine,
            user_id=community["budi"],
            quantities={"organic": 50, "plastic": 50, "electronic": 50, "other": 50},
            today=DAY,
        )
        assert result.points == 45

    def test_negative_quantity(self, db_engine, community):
        with pytest.raises(InvalidInput):
            report_service.submit_report(
                db_engine, user_id=community["budi"], quantities={"plastic": -1}, today=DAY,
            )
        assert _count_reports(db_engine) == 0

    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_non_finite_quantity(self, db_engine, community, bad):
        with pytest.raises(InvalidInput):
            report_service.submit_report(
                db_engine, user_id=community["budi"], quantities={"organic": bad}, today=DAY,
            )
        assert _count_reports(db_engine) == 0

    def test_unique_constraint_catches_racing_duplicate(self, db_engine, community, monkeypatch):
        first = report_service.submit_report(
            db_engine, user_id=community["budi"], quantities={"organic": 2}, today=DAY,
        )
        # A second submission that passed the duplicate check before the first committed
        monkeypatch.setattr(report_service, "find_existing_report", lambda *args: None)

        with pytest.raises(DuplicateReport):
            report_service.submit_report(
                db_engine, user_id=community["budi"], quantities={"organic": 40}, today=DAY,
            )

        assert _count_reports(db_engine) == 1
        with Session(db_engine) as session:
            kept = session.get(UserReport, first.id)
            assert kept.organic == 2
            assert kept.points == 1


class TestCompleteChallenge:
    def test_awards_challenge_points(self, db_engine, community):
        result = report_service.complete_challenge(
            db_engine,
            neighborhood_id=community["rt2"],
            challenge_id=community["challenge"],
            today=DAY,
        )
        assert result.awarded_points == 50

        with Session(db_engine) as session:
            award = session.get(Report, result.id)
            assert isinstance(award, ChallengeAward)
            assert not hasattr(award, "user_id")
            assert not hasattr(award, "organic")
            assert award.challenge_id == community["challenge"]
            assert award.status == "pending"
            assert award.date == "2026-10-18"

    def test_repeatable_same_day(self, db_engine, community):
        for _ in range(2):
            report_service.complete_challenge(
                db_engine,
                neighborhood_id=community["rt1"],
                challenge_id=community["challenge"],
                today=DAY,
            )
        assert _count_reports(db_engine) == 2

    def test_unknown_challenge(self, db_engine, community):
        with pytest.raises(ChallengeNotFound):
            report_service.complete_challenge(
                db_engine, neighborhood_id=community["rt1"], challenge_id=999,
            )

    def test_unknown_neighborhood(self, db_engine, community):
        with pytest.raises(NeighborhoodNotFound):
            report_service.complete_challenge(
                db_engine, neighborhood_id=999, challenge_id=community["challenge"],
            )


class TestReportKinds:
    def test_columns_belong_to_their_kind(self):
        assert {"user_id", "organic", "plastic", "electronic", "other"} <= set(
            UserReport.__mapper__.columns.keys()
        )
        assert "challenge_id" not in UserReport.__mapper__.columns.keys()
        assert "challenge_id" in ChallengeAward.__mapper__.columns.keys()
        assert "organic" not in ChallengeAward.__mapper__.columns.keys()

    def test_kinds_share_one_table_with_daily_constraint(self):
        assert UserReport.__table__ is ChallengeAward.__table__ is Report.__table__
        names = {c.name for c in Report.__table__.constraints}
        assert "uq_reports_user_date" in names
