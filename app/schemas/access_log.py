# app/schemas/access_log.py
from datetime import datetime
from typing import Optional
from app.schemas.base import CamelModel
from app.schemas.gate import GateOut
from app.schemas.user import UserOut
from app.schemas.vehicle import VehicleOut
from app.schemas.visitor import VisitorOut


class AccessLogOut(CamelModel):
    id: str
    vehicle_id: Optional[str]
    user_id: Optional[str]
    visitor_id: Optional[str]
    gate_id: Optional[str]
    timestamp: datetime
    action: str             # entry | exit
    auth_method: str        # qr_code | rfid | manual_override
    status: str             # authorized | denied | manual_override
    reason: Optional[str]
    processed_by: Optional[str]


class AccessLogDetailOut(AccessLogOut):
    vehicle: Optional[VehicleOut] = None
    user: Optional[UserOut] = None
    gate: Optional[GateOut] = None
    visitor: Optional[VisitorOut] = None
    processed_by_user: Optional[UserOut] = None
