# app/schemas/access.py
from typing import Optional
from app.schemas.access_log import AccessLogOut
from app.schemas.base import CamelModel
from app.schemas.gate import GateOut
from app.schemas.vehicle import VehicleOut
from app.schemas.visitor import VisitorOut


class ScanRequest(CamelModel):
    code: str


class ScanResponse(CamelModel):
    type: str                       # vehicle | visitor
    authorized: bool
    message: str
    gate_available: bool
    gate: Optional[GateOut] = None
    log: AccessLogOut
    license_plate: Optional[str] = None
    vehicle: Optional[VehicleOut] = None
    visitor: Optional[VisitorOut] = None


class OverrideResponse(CamelModel):
    success: bool
    gate: GateOut
    log: AccessLogOut
