"""
smartwaste.api.routes.public — Leaderboard, challenges & classifier
=====================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Engine

from smartwaste.api.deps import get_engine
from smartwaste.api.rate_limit import rate_limited
from smartwaste.engine.classifier import classify
from smartwaste.services import account_service, leaderboard_service, report_service

router = APIRouter(tags=["public"], dependencies=[Depends(rate_limited)])


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class ChallengeCompletion(BaseModel):
    rt_id: int
    challenge_id: int


class ClassifyRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    text: str | None = ""
    organic: float | None = Field(0, ge=0)
    plastic: float | None = Field(0, ge=0)
    electronic: float | None = Field(0, ge=0)
    other: float | None = Field(0, ge=0)


# ---------------------------------------------------------------------------
# GET /leaderboard
# ---------------------------------------------------------------------------
@router.get("/leaderboard")
def get_leaderboard(engine: Engine = Depends(get_engine)):
    """Neighborhoods ranked by approved points."""
    return [
        {
            "id": e.neighborhood_id,
            "name": e.name,
            "total_points": e.total_points,
            "approved_reports": e.approved_count,
            "pending_reports": e.pending_count,
        }
        for e in leaderboard_service.compute_leaderboard(engine)
    ]


# ---------------------------------------------------------------------------
# Challenges
# ---------------------------------------------------------------------------
@router.get("/challenges")
def get_challenges(engine: Engine = Depends(get_engine)):
    return [
        {
            "id": c.id,
            "title": c.title,
            "description": c.description,
            "start_date": c.start_date,
            "end_date": c.end_date,
            "points": c.points,
        }
        for c in account_service.list_challenges(engine)
    ]


@router.post("/challenges/complete")
def complete_challenge(body: ChallengeCompletion, engine: Engine = Depends(get_engine)):
    result = report_service.complete_challenge(
        engine, neighborhood_id=body.rt_id, challenge_id=body.challenge_id
    )
    return {"awarded": result.awarded_points, "report_id": result.id}


# ---------------------------------------------------------------------------
# POST /classify
# ---------------------------------------------------------------------------
@router.post("/classify")
def classify_waste(body: ClassifyRequest):
    """Rule-based category, recommendation and eco-score."""
    return classify(body.text, body.model_dump(exclude={"text"})).to_dict()
