# app/services/credential_resolver.py
"""
Credential resolver - turns a scanned string into the thing it identifies.

Lookup order (first match wins):
  1. vehicle QR code
  2. vehicle RFID tag
  3. visitor pass QR code
Vehicle credentials always take precedence over visitor passes, so a string that
exists in more than one index resolves the same way every time.
"""

from dataclasses import dataclass
from typing import Optional

from app.models.vehicle import Vehicle
from app.models.visitor import Visitor
from app.services.repository import EntityRepository

VEHICLE = "vehicle"
VISITOR = "visitor"
UNRESOLVED = "unresolved"


@dataclass
class ResolvedCredential:
    kind: str                             # vehicle | visitor | unresolved
    code: str
    auth_method: Optional[str] = None     # qr_code | rfid (index that matched)
    vehicle: Optional[Vehicle] = None
    visitor: Optional[Visitor] = None

    @property
    def resolved(self) -> bool:
        return self.kind != UNRESOLVED


def resolve_credential(repo: EntityRepository, code: str) -> ResolvedCredential:
    vehicle = repo.get_vehicle_by_qr_code(code)
    if vehicle is not None:
        return ResolvedCredential(VEHICLE, code, "qr_code", vehicle=vehicle)

    vehicle = repo.get_vehicle_by_rfid(code)
    if vehicle is not None:
        return ResolvedCredential(VEHICLE, code, "rfid", vehicle=vehicle)

    visitor = repo.get_visitor_by_qr_code(code)
    if visitor is not None:
        return ResolvedCredential(VISITOR, code, "qr_code", visitor=visitor)

    return ResolvedCredential(UNRESOLVED, code)
