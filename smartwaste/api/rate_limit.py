"""
smartwaste.api.rate_limit — Per-Client Request Rate Limiting
==============================================================

Every ``/api`` router except health spends one unit of the caller's budget
per request: 30 requests per sliding 60-second window per client IP by
default (tunable in ``config.yaml``).  An exhausted budget is answered with
HTTP 429 and a ``Retry-After`` header.

Request events live in the ``rate_limit_events`` table, so every worker
process sees the same budget.  Each :meth:`RateLimiter.acquire` runs in one
transaction that first sweeps expired events of *all* clients, then counts
and records the caller's request.  The table therefore holds at most one
window's worth of traffic.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from fastapi import HTTPException, Request, status
from sqlalchemy import Engine, delete, func, select
from sqlalchemy.orm import Session

from smartwaste.api.deps import client_id
from smartwaste.database.models import RateLimitEvent

logger = logging.getLogger(__name__)

DEFAULT_RATE_LIMIT = 30
DEFAULT_WINDOW_SECONDS = 60


@dataclass(frozen=True, slots=True)
class Budget:
    """Outcome of one budget lookup for a client."""

    allowed: bool
    limit: int
    remaining: int
    retry_after: int

    def headers(self) -> dict[str, str]:
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
        }
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after)
        return headers


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class RateLimiter:
    """Sliding-window request budget keyed by client identity."""

    def __init__(
        self,
        max_requests: int = DEFAULT_RATE_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        *,
        engine: Engine,
    ) -> None:
        self.max_requests = max_requests
        self.window = timedelta(seconds=window_seconds)
        self.engine = engine

    def _usage(
        self, session: Session, client: str, since: datetime
    ) -> tuple[int, datetime | None]:
        """(events in window, oldest event in window) for *client*."""
        count, oldest = session.execute(
            select(func.count(RateLimitEvent.id), func.min(RateLimitEvent.timestamp))
            .where(RateLimitEvent.client_id == client, RateLimitEvent.timestamp > since)
        ).one()
        return count, oldest

    def _denied(self, oldest: datetime | None, now: datetime) -> Budget:
        wait = self.window.total_seconds()
        if oldest is not None:
            wait = (_as_utc(oldest) + self.window - now).total_seconds()
        return Budget(
            allowed=False,
            limit=self.max_requests,
            remaining=0,
            retry_after=max(1, int(wait) + 1),
        )

    def acquire(self, client: str, *, now: datetime | None = None) -> Budget:
        """Spend one request from *client*'s budget if any is left.

        A denied request is not recorded, so retrying while throttled does
        not push the reset further out.
        """
        now = now or datetime.now(UTC)
        since = now - self.window

        with Session(self.engine) as session:
            session.execute(delete(RateLimitEvent).where(RateLimitEvent.timestamp <= since))
            used, oldest = self._usage(session, client, since)

            if used >= self.max_requests:
                session.commit()
                return self._denied(oldest, now)

            session.add(RateLimitEvent(client_id=client, timestamp=now))
            session.commit()

        return Budget(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - used - 1,
            retry_after=0,
        )

    def peek(self, client: str, *, now: datetime | None = None) -> Budget:
        """Report *client*'s budget without spending any of it."""
        now = now or datetime.now(UTC)

        with Session(self.engine) as session:
            used, oldest = self._usage(session, client, now - self.window)

        if used >= self.max_requests:
            return self._denied(oldest, now)
        return Budget(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - used,
            retry_after=0,
        )

    def reset(self, client: str | None = None) -> None:
        """Forget recorded requests of *client*, or of everyone."""
        stmt = delete(RateLimitEvent)
        if client is not None:
            stmt = stmt.where(RateLimitEvent.client_id == client)
        with Session(self.engine) as session:
            session.execute(stmt)
            session.commit()


# ---------------------------------------------------------------------------
# Process-wide limiter, installed by the app's lifespan hook
# ---------------------------------------------------------------------------
_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    if _limiter is None:
        raise RuntimeError("Rate limiter not configured; call configure_rate_limiter() first")
    return _limiter


def configure_rate_limiter(
    *,
    engine: Engine,
    max_requests: int = DEFAULT_RATE_LIMIT,
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
) -> RateLimiter:
    """Install the process-wide limiter backed by *engine*."""
    global _limiter
    _limiter = RateLimiter(max_requests, window_seconds, engine=engine)
    return _limiter


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------
async def rate_limited(request: Request) -> None:
    """Spend one request of the caller's budget; 429 when it is exhausted.

    Attach with ``dependencies=[Depends(rate_limited)]`` on a router.
    """
    limiter = get_rate_limiter()
    client = client_id(request.client.host if request.client else None)

    budget = await asyncio.to_thread(limiter.acquire, client)
    if not budget.allowed:
        logger.warning(
            "Rate limit exceeded for %s (%d requests per %ds)",
            client, limiter.max_requests, int(limiter.window.total_seconds()),
        )
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "Too many requests, please try again later",
                "retry_after": budget.retry_after,
            },
            headers=budget.headers(),
        )
