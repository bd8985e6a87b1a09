"""
smartwaste.errors — Domain Error Taxonomy
==========================================

Services raise these; the API maps each one to an HTTP response through a
single exception handler (see :mod:`smartwaste.api.main`).  Every error is
local to the operation that raised it and is raised before the session
commits, so nothing is half-written.

    SmartWasteError
    ├── NotFound          (404)  UserNotFound, ReportNotFound,
    │                            ChallengeNotFound, NeighborhoodNotFound
    ├── Conflict          (409)  DuplicateReport, AlreadyDecided,
    │                            PhoneAlreadyRegistered
    ├── LimitExceeded     (400)  QuantityExceedsLimit
    ├── NotAuthorized     (403)
    └── InvalidInput      (400)
"""

from __future__ import annotations


class SmartWasteError(Exception):
    """Base class for all recoverable domain errors."""

    status_code: int = 400
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------
class NotFound(SmartWasteError):
    status_code = 404
    default_message = "Not found"


class UserNotFound(NotFound):
    default_message = "User not found or inactive"


class ReportNotFound(NotFound):
    default_message = "Report not found"


class ChallengeNotFound(NotFound):
    default_message = "Challenge not found"


class NeighborhoodNotFound(NotFound):
    default_message = "Neighborhood not found"


# ---------------------------------------------------------------------------
# Conflict
# ---------------------------------------------------------------------------
class Conflict(SmartWasteError):
    status_code = 409
    default_message = "Conflict"


class DuplicateReport(Conflict):
    default_message = "Already reported today"


class AlreadyDecided(Conflict):
    default_message = "Report has already been decided"


class PhoneAlreadyRegistered(Conflict):
    default_message = "Phone number already registered"


# ---------------------------------------------------------------------------
# Everything else
# ---------------------------------------------------------------------------
class LimitExceeded(SmartWasteError):
    status_code = 400
    default_message = "Limit exceeded"


class QuantityExceedsLimit(LimitExceeded):
    default_message = "Daily limit exceeded (max 50kg per category)"


class NotAuthorized(SmartWasteError):
    status_code = 403
    default_message = "Access denied: pengurus only"


class InvalidInput(SmartWasteError):
    status_code = 400
    default_message = "Invalid input"
