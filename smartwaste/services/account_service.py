"""
smartwaste.services.account_service — Registration, Login & Reference Data
============================================================================

Phone numbers are the login key.  There are no passwords or tokens: the
caller is trusted to pass its own user id on later requests.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smartwaste.database.models import (
    Challenge,
    Neighborhood,
    User,
    UserRole,
    UserStatus,
)
from smartwaste.errors import (
    InvalidInput,
    NeighborhoodNotFound,
    PhoneAlreadyRegistered,
    UserNotFound,
)

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


def phone_registered(session: Session, phone: str) -> bool:
    return session.scalar(select(User.id).where(User.phone == phone)) is not None


def register_user(
    engine: Engine,
    *,
    name: str,
    phone: str,
    neighborhood_id: int,
) -> User:
    """Create a new active resident.  Administrators are only seeded."""
    name = (name or "").strip()
    phone = (phone or "").strip()
    if not name or not phone:
        raise InvalidInput("Name, phone, and rt_id required")

    with Session(engine, expire_on_commit=False) as session:
        if session.get(Neighborhood, neighborhood_id) is None:
            raise NeighborhoodNotFound()
        if phone_registered(session, phone):
            raise PhoneAlreadyRegistered()

        user = User(
            name=name,
            phone=phone,
            neighborhood_id=neighborhood_id,
            role=UserRole.RESIDENT.value,
            status=UserStatus.ACTIVE.value,
        )
        session.add(user)
        try:
            session.flush()
        except IntegrityError:
            session.rollback()
            raise PhoneAlreadyRegistered() from None
        session.commit()
        session.refresh(user)
        session.expunge(user)

    logger.info("Registered user %d in neighborhood %d", user.id, neighborhood_id)
    return user


def login(engine: Engine, phone: str) -> tuple[User, str]:
    """Return ``(user, neighborhood name)`` for an active user with *phone*."""
    if not phone:
        raise InvalidInput("Phone number required")

    with Session(engine, expire_on_commit=False) as session:
        row = session.execute(
            select(User, Neighborhood.name)
            .join(Neighborhood, User.neighborhood_id == Neighborhood.id)
            .where(User.phone == phone)
        ).first()
        if row is None or not row[0].is_active:
            raise UserNotFound()
        user, hood_name = row
        session.expunge(user)
        return user, hood_name


def list_neighborhoods(engine: Engine) -> list[Neighborhood]:
    with Session(engine, expire_on_commit=False) as session:
        rows = session.scalars(select(Neighborhood).order_by(Neighborhood.id)).all()
        session.expunge_all()
        return list(rows)


def list_challenges(engine: Engine) -> list[Challenge]:
    """All challenges, newest first."""
    with Session(engine, expire_on_commit=False) as session:
        rows = session.scalars(select(Challenge).order_by(Challenge.id.desc())).all()
        session.expunge_all()
        return list(rows)
