# app/routers/gates.py
"""Gate listing, configuration and manual override."""

from fastapi import APIRouter, Depends

from app.dependencies import get_gate_controller, get_repository
from app.exceptions import GateNotFound
from app.schemas.access import OverrideResponse
from app.schemas.gate import GateCreate, GateOut, GateOverrideRequest, GateUpdate, GateWithOfficerOut
from app.services.gate_controller import GateController
from app.services.override_handler import apply_override
from app.services.repository import EntityRepository

router = APIRouter()


@router.get("/gates", response_model=list[GateWithOfficerOut], summary="List gates with assigned officer")
def list_gates(repo: EntityRepository = Depends(get_repository)):
    return repo.gates_with_officers()


@router.post("/gates", response_model=GateOut, summary="Add a gate")
def create_gate(body: GateCreate, repo: EntityRepository = Depends(get_repository)):
    return repo.create("gate", body.model_dump())


@router.post("/gates/override", response_model=OverrideResponse, summary="Force a gate open or closed")
async def override_gate(
    body: GateOverrideRequest,
    repo: EntityRepository = Depends(get_repository),
    controller: GateController = Depends(get_gate_controller),
):
    """Requires a non-empty reason. Always logged as manual_override."""
    result = await apply_override(repo, controller, body)
    return OverrideResponse(success=result.success, gate=result.gate, log=result.log)


@router.patch("/gates/{gate_id}", response_model=GateOut, summary="Update gate details or status")
async def update_gate(
    gate_id: str,
    body: GateUpdate,
    repo: EntityRepository = Depends(get_repository),
    controller: GateController = Depends(get_gate_controller),
):
    """Taking an open gate offline (or into maintenance) closes it."""
    if repo.get("gate", gate_id) is None:
        raise GateNotFound(gate_id)

    with repo.transaction():
        gate = repo.update("gate", gate_id, body.model_dump(exclude_unset=True))
        if gate.is_open and gate.status != "online":
            controller.close(repo, gate_id)
    return gate
