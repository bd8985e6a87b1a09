"""
smartwaste.engine.lifecycle — Report Approval State Machine
=============================================================

Pure transition rules; persistence and authorization live in
:mod:`smartwaste.services.approval_service`.

States::

    pending ──approve──▶ approved   (terminal)
       │
       └────reject────▶ rejected   (terminal)
"""

from __future__ import annotations

import enum

from smartwaste.database.models import ReportStatus
from smartwaste.errors import AlreadyDecided, InvalidInput


class ReviewAction(enum.StrEnum):
    APPROVE = "approve"
    REJECT = "reject"


TRANSITIONS: dict[tuple[ReportStatus, ReviewAction], ReportStatus] = {
    (ReportStatus.PENDING, ReviewAction.APPROVE): ReportStatus.APPROVED,
    (ReportStatus.PENDING, ReviewAction.REJECT): ReportStatus.REJECTED,
}


def parse_action(action: str | ReviewAction) -> ReviewAction:
    """Coerce *action* into a :class:`ReviewAction` or raise InvalidInput."""
    try:
        return ReviewAction(str(action).lower())
    except ValueError:
        raise InvalidInput(
            f"Unknown action {action!r}; expected 'approve' or 'reject'"
        ) from None


def is_terminal(status: str | ReportStatus) -> bool:
    return ReportStatus(status) is not ReportStatus.PENDING


def next_status(current: str | ReportStatus, action: str | ReviewAction) -> ReportStatus:
    """Return the status reached by applying *action* to *current*.

    Raises
    ------
    InvalidInput
        If *action* is not ``approve`` or ``reject``.
    AlreadyDecided
        If *current* is terminal.
    """
    review = parse_action(action)
    if is_terminal(current):
        raise AlreadyDecided(f"Report is already {ReportStatus(current).value}")
    return TRANSITIONS[(ReportStatus(current), review)]
