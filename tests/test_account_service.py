"""
tests/test_account_service.py — Registration, Login & Reference Lists
=======================================================================
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from smartwaste.database.models import Challenge, User
from smartwaste.errors import (
    InvalidInput,
    NeighborhoodNotFound,
    PhoneAlreadyRegistered,
    UserNotFound,
)
from smartwaste.services import account_service


class TestRegister:
    def test_registers_active_resident(self, db_engine, community):
        user = account_service.register_user(
            db_engine, name="Wati", phone="0899", neighborhood_id=community["rt3"],
        )
        assert user.id is not None
        assert user.role == "warga"
        assert user.status == "active"

    def test_duplicate_phone(self, db_engine, community):
        with pytest.raises(PhoneAlreadyRegistered):
            account_service.register_user(
                db_engine, name="Other Budi", phone="0811", neighborhood_id=community["rt1"],
            )

    def test_unique_phone_constraint_catches_racing_registration(
        self, db_engine, community, monkeypatch
    ):
        # Another registration for the same phone committed after the lookup
        monkeypatch.setattr(account_service, "phone_registered", lambda *args: False)

        with pytest.raises(PhoneAlreadyRegistered):
            account_service.register_user(
                db_engine, name="Budi Lain", phone="0811", neighborhood_id=community["rt2"],
            )

        with Session(db_engine) as session:
            assert session.scalar(select(func.count()).select_from(User)) == 6
            assert session.scalar(select(User.name).where(User.phone == "0811")) == "Budi"

    def test_unknown_neighborhood(self, db_engine, community):
        with pytest.raises(NeighborhoodNotFound):
            account_service.register_user(
                db_engine, name="Wati", phone="0899", neighborhood_id=999,
            )

    def test_blank_fields(self, db_engine, community):
        with pytest.raises(InvalidInput):
            account_service.register_user(
                db_engine, name="  ", phone="0899", neighborhood_id=community["rt1"],
            )


class TestLogin:
    def test_login_by_phone(self, db_engine, community):
        user, rt_name = account_service.login(db_engine, "0812")
        assert user.id == community["siti"]
        assert user.is_administrator
        assert rt_name == "RT 01"

    def test_inactive_user_cannot_log_in(self, db_engine, community):
        with pytest.raises(UserNotFound):
            account_service.login(db_engine, "0815")

    def test_unknown_phone(self, db_engine, community):
        with pytest.raises(UserNotFound):
            account_service.login(db_engine, "0000")

    def test_missing_phone(self, db_engine, community):
        with pytest.raises(InvalidInput):
            account_service.login(db_engine, "")


class TestReferenceLists:
    def test_neighborhoods_by_id(self, db_engine, community):
        names = [n.name for n in account_service.list_neighborhoods(db_engine)]
        assert names == ["RT 01", "RT 02", "RT 03"]

    def test_challenges_newest_first(self, db_engine, community, db_session):
        db_session.add(Challenge(title="Kompos bersama", points=20))
        db_session.commit()

        titles = [c.title for c in account_service.list_challenges(db_engine)]
        assert titles == ["Kompos bersama", "Hari tanpa plastik"]
