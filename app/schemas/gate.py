# app/schemas/gate.py
from datetime import datetime
from typing import Literal, Optional
from pydantic import field_validator
from app.schemas.base import CamelModel, not_null
from app.schemas.user import UserOut

GateStatus = Literal["online", "offline", "maintenance"]


class GateCreate(CamelModel):
    name: str
    location: str
    status: GateStatus = "online"
    assigned_officer: Optional[str] = None


class GateUpdate(CamelModel):
    name: Optional[str] = None
    location: Optional[str] = None
    status: Optional[GateStatus] = None
    assigned_officer: Optional[str] = None

    @field_validator("name", "location", "status", mode="before")
    @classmethod
    def keep_required(cls, v):
        return not_null(v)


class GateOut(CamelModel):
    id: str
    name: str
    location: str
    status: str
    is_open: bool
    last_activity: Optional[datetime]
    assigned_officer: Optional[str]


class GateWithOfficerOut(GateOut):
    officer: Optional[UserOut] = None


class GateOverrideRequest(CamelModel):
    gate_id: str
    action: Literal["open", "close"]
    reason: Optional[str] = None
    user_id: str
