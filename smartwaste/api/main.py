"""
smartwaste.api.main — FastAPI application entry point
=======================================================

Run with::

    uvicorn smartwaste.api.main:app --reload --port 4000

or ``python -m smartwaste.api`` to pick the port up from ``config.yaml``.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from smartwaste.api.deps import get_config, get_engine  # noqa: E402
from smartwaste.api.rate_limit import configure_rate_limiter  # noqa: E402
from smartwaste.api.routes.accounts import router as accounts_router  # noqa: E402
from smartwaste.api.routes.public import router as public_router  # noqa: E402
from smartwaste.api.routes.reports import router as reports_router  # noqa: E402
from smartwaste.database.engine import init_db  # noqa: E402
from smartwaste.errors import SmartWasteError  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
      3) any origin
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — create tables, seed, arm the throttle."""
    cfg = get_config()
    engine = get_engine()
    init_db(engine, seed=cfg.seed_reference_data)
    configure_rate_limiter(
        engine=engine,
        max_requests=cfg.rate_limit_requests,
        window_seconds=cfg.rate_limit_window_seconds,
    )
    logger.info("SmartWaste API started for %s (%s)", cfg.community_name, engine.url.database)
    yield
    logger.info("SmartWaste API shutting down")


app = FastAPI(
    title="SmartWaste API",
    version="1.0.0",
    lifespan=lifespan,
)

_origins = _cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    client = request.client.host if request.client else "unknown"
    logger.info("%s %s from %s", request.method, request.url.path, client)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Error mapping — every domain error becomes {"error": message}
# ---------------------------------------------------------------------------
@app.exception_handler(SmartWasteError)
async def smartwaste_error_handler(request: Request, exc: SmartWasteError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Rejected values may be NaN or Infinity, which JSON cannot carry.
    details = [
        {k: v for k, v in err.items() if k not in ("input", "ctx")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input", "details": jsonable_encoder(details)},
    )


# Mount routers
app.include_router(accounts_router, prefix="/api")
app.include_router(reports_router, prefix="/api")
app.include_router(public_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
