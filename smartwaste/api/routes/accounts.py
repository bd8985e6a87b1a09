"""
smartwaste.api.routes.accounts — Phone login, registration & neighborhoods
============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import Engine

from smartwaste.api.deps import get_engine
from smartwaste.api.rate_limit import rate_limited
from smartwaste.services import account_service

router = APIRouter(tags=["accounts"], dependencies=[Depends(rate_limited)])


class LoginRequest(BaseModel):
    phone: str | None = None


class RegisterRequest(BaseModel):
    name: str
    phone: str
    rt_id: int


@router.post("/login")
def login(body: LoginRequest, engine: Engine = Depends(get_engine)):
    user, rt_name = account_service.login(engine, body.phone or "")
    return {
        "user": {
            "id": user.id,
            "name": user.name,
            "phone": user.phone,
            "rt_id": user.neighborhood_id,
            "rt_name": rt_name,
            "role": user.role,
        }
    }


@router.post("/register")
def register(body: RegisterRequest, engine: Engine = Depends(get_engine)):
    user = account_service.register_user(
        engine, name=body.name, phone=body.phone, neighborhood_id=body.rt_id
    )
    return {"user_id": user.id, "message": "Registration successful"}


@router.get("/rts")
def get_neighborhoods(engine: Engine = Depends(get_engine)):
    return [{"id": n.id, "name": n.name} for n in account_service.list_neighborhoods(engine)]
