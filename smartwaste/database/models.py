"""
smartwaste.database.models — SQLAlchemy 2.0 Data Models
=========================================================

Tables:
- neighborhoods     — RT units that own users and reports
- users             — Residents (warga) and administrators (pengurus)
- reports           — Daily waste reports and challenge awards (one table,
                      discriminated by ``kind``)
- challenges        — Community incentives with a fixed point award
- rate_limit_events — Durable request log for the API throttle

``reports`` holds two row shapes.  :class:`UserReport` is a resident's
daily submission with per-category quantities; :class:`ChallengeAward` is
a neighborhood-level award with no user and no quantities.  Both share the
lifecycle columns (``points``, ``status``, ``verified_by``) so the
approval flow and the leaderboard treat them uniformly.
"""

from __future__ import annotations

import enum
from datetime import UTC, datetime

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all SmartWaste ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class UserRole(enum.StrEnum):
    """Stored values keep the community's own vocabulary."""
    RESIDENT = "warga"
    ADMINISTRATOR = "pengurus"


class UserStatus(enum.StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ReportStatus(enum.StrEnum):
    """Lifecycle of a report.  ``approved`` and ``rejected`` are terminal."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportKind(enum.StrEnum):
    """Discriminator for the ``reports`` table."""
    USER = "user"
    CHALLENGE_AWARD = "challenge_award"


# ---------------------------------------------------------------------------
# Neighborhood (RT)
# ---------------------------------------------------------------------------
class Neighborhood(Base):
    __tablename__ = "neighborhoods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    users: Mapped[list[User]] = relationship(back_populates="neighborhood")
    reports: Mapped[list[Report]] = relationship(back_populates="neighborhood")

    def __repr__(self) -> str:
        return f"<Neighborhood id={self.id} name={self.name!r}>"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    neighborhood_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("neighborhoods.id"), nullable=False
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.RESIDENT.value
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserStatus.ACTIVE.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    neighborhood: Mapped[Neighborhood] = relationship(back_populates="users")

    __table_args__ = (
        Index("ix_users_neighborhood_role", "neighborhood_id", "role"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    @property
    def is_administrator(self) -> bool:
        return self.role == UserRole.ADMINISTRATOR.value

    def __repr__(self) -> str:
        return f"<User id={self.id} name={self.name!r} role={self.role}>"


# ---------------------------------------------------------------------------
# Challenges — static reference data
# ---------------------------------------------------------------------------
class Challenge(Base):
    __tablename__ = "challenges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    start_date: Mapped[str | None] = mapped_column(String(10), default=None)
    end_date: Mapped[str | None] = mapped_column(String(10), default=None)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<Challenge id={self.id} title={self.title!r} points={self.points}>"


# ---------------------------------------------------------------------------
# Reports — single-table inheritance over ``kind``
# ---------------------------------------------------------------------------
class Report(Base):
    """Common lifecycle columns for every row in ``reports``.

    ``date`` is a calendar-day string (``YYYY-MM-DD``).  ``points`` is fixed
    at creation time and never recomputed.  Columns that only one kind
    carries are declared on that subclass; they are nullable in the shared
    table.
    """
    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    neighborhood_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("neighborhoods.id"), nullable=False
    )
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ReportStatus.PENDING.value
    )
    verified_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )

    neighborhood: Mapped[Neighborhood] = relationship(back_populates="reports")

    __mapper_args__ = {
        "polymorphic_on": "kind",
        "polymorphic_abstract": True,
    }

    __table_args__ = (
        Index("ix_reports_neighborhood_status", "neighborhood_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} id={self.id} rt={self.neighborhood_id} "
            f"points={self.points} status={self.status}>"
        )


class UserReport(Report):
    """A resident's daily waste-sorting submission."""

    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), default=None
    )
    organic: Mapped[float | None] = mapped_column(Float, default=None)
    plastic: Mapped[float | None] = mapped_column(Float, default=None)
    electronic: Mapped[float | None] = mapped_column(Float, default=None)
    other: Mapped[float | None] = mapped_column(Float, default=None)

    user: Mapped[User | None] = relationship(foreign_keys=[user_id])

    __mapper_args__ = {"polymorphic_identity": ReportKind.USER.value}


class ChallengeAward(Report):
    """Neighborhood-level award for completing a challenge."""

    challenge_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("challenges.id"), default=None
    )

    challenge: Mapped[Challenge | None] = relationship()

    __mapper_args__ = {"polymorphic_identity": ReportKind.CHALLENGE_AWARD.value}


# One submission per user per day.  NULL user_id (awards) is exempt.  Added
# here because ``user_id`` only joins the table with UserReport.
Report.__table__.append_constraint(
    UniqueConstraint("user_id", "date", name="uq_reports_user_date")
)


# ---------------------------------------------------------------------------
# RateLimitEvent — durable request events for the API throttle
# ---------------------------------------------------------------------------
class RateLimitEvent(Base):
    __tablename__ = "rate_limit_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[str] = mapped_column(String(64), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_rate_limit_client_ts", "client_id", "timestamp"),
        Index("ix_rate_limit_ts", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<RateLimitEvent client={self.client_id!r} ts={self.timestamp}>"
