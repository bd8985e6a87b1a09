"""
smartwaste.api.routes.reports — Report submission & administrator review
==========================================================================
"""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Engine

from smartwaste.api.deps import get_engine
from smartwaste.api.rate_limit import rate_limited
from smartwaste.engine.lifecycle import ReviewAction
from smartwaste.engine.scoring import Quantities
from smartwaste.services import approval_service, report_service

router = APIRouter(tags=["reports"], dependencies=[Depends(rate_limited)])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class ReportCreate(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    user_id: int
    date: dt.date | None = None
    organic: float = Field(0, ge=0)
    plastic: float = Field(0, ge=0)
    electronic: float = Field(0, ge=0)
    other: float = Field(0, ge=0)


class ReportDecision(BaseModel):
    report_id: int
    pengurus_id: int
    action: ReviewAction


# ---------------------------------------------------------------------------
# POST /report
# ---------------------------------------------------------------------------
@router.post("/report")
def submit_report(body: ReportCreate, engine: Engine = Depends(get_engine)):
    """Submit today's (or ``date``'s) waste report; starts ``pending``."""
    result = report_service.submit_report(
        engine,
        user_id=body.user_id,
        report_date=body.date,
        quantities=Quantities(
            organic=body.organic,
            plastic=body.plastic,
            electronic=body.electronic,
            other=body.other,
        ),
    )
    return {"id": result.id, "points": result.points, "status": result.status}


# ---------------------------------------------------------------------------
# GET /pending-reports/{rt_id}
# ---------------------------------------------------------------------------
@router.get("/pending-reports/{rt_id}")
def pending_reports(
    rt_id: int,
    pengurus_id: int = Query(...),
    engine: Engine = Depends(get_engine),
):
    """Pending reports of a neighborhood, for its own administrator."""
    rows = approval_service.list_pending_reports(
        engine, neighborhood_id=rt_id, administrator_id=pengurus_id
    )
    return [r.to_dict() for r in rows]


# ---------------------------------------------------------------------------
# POST /approve-report
# ---------------------------------------------------------------------------
@router.post("/approve-report")
def approve_report(body: ReportDecision, engine: Engine = Depends(get_engine)):
    result = approval_service.decide_report(
        engine,
        report_id=body.report_id,
        administrator_id=body.pengurus_id,
        action=body.action,
    )
    return {"message": f"Report {result.status}", "status": result.status}
