"""
tests/test_lifecycle.py — Approval State Machine Transitions
==============================================================
"""

from __future__ import annotations

import pytest

from smartwaste.database.models import ReportStatus
from smartwaste.engine.lifecycle import ReviewAction, is_terminal, next_status, parse_action
from smartwaste.errors import AlreadyDecided, InvalidInput


class TestNextStatus:
    def test_approve_pending(self):
        assert next_status("pending", "approve") is ReportStatus.APPROVED

    def test_reject_pending(self):
        assert next_status(ReportStatus.PENDING, ReviewAction.REJECT) is ReportStatus.REJECTED

    @pytest.mark.parametrize("current", ["approved", "rejected"])
    @pytest.mark.parametrize("action", ["approve", "reject"])
    def test_terminal_states_refuse_any_action(self, current, action):
        with pytest.raises(AlreadyDecided):
            next_status(current, action)

    def test_unknown_action(self):
        with pytest.raises(InvalidInput):
            next_status("pending", "maybe")


class TestHelpers:
    def test_parse_action_is_case_insensitive(self):
        assert parse_action("APPROVE") is ReviewAction.APPROVE

    def test_is_terminal(self):
        assert not is_terminal("pending")
        assert is_terminal("approved")
        assert is_terminal(ReportStatus.REJECTED)
