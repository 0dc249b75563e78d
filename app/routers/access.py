# app/routers/access.py
"""Gate scanners post QR / RFID codes here."""

from fastapi import APIRouter, Depends

from app.dependencies import get_gate_controller, get_repository
from app.schemas.access import ScanRequest, ScanResponse
from app.services.authorization_engine import AuthorizationEngine
from app.services.gate_controller import GateController
from app.services.repository import EntityRepository

router = APIRouter()


@router.post("/access/scan", response_model=ScanResponse, summary="Validate a scanned QR code or RFID tag")
async def scan_code(
    body: ScanRequest,
    repo: EntityRepository = Depends(get_repository),
    controller: GateController = Depends(get_gate_controller),
):
    """
    Resolves the code to a vehicle or visitor pass and decides entry.
    200 → granted (first online gate opened, closes on its own)
    403 → credential recognised but rejected (denial is logged)
    404 → code not recognised (nothing logged)
    """
    outcome = await AuthorizationEngine(repo, controller).scan(body.code)
    return ScanResponse(
        type=outcome.credential_type,
        authorized=outcome.authorized,
        message=outcome.message,
        gate_available=outcome.gate_available,
        gate=outcome.gate,
        log=outcome.log,
        license_plate=outcome.license_plate,
        vehicle=outcome.vehicle,
        visitor=outcome.visitor,
    )
