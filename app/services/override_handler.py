# app/services/override_handler.py
"""
Manual override - an officer forces a gate open or closed without a credential.

A written reason is mandatory and is checked before anything is looked up or
touched. The gate, then the acting officer, must exist. The gate change and
its access-log row (status + method manual_override, officer as
processed_by) are committed together.
An override-opened gate stays open until someone closes it; no auto-close.
"""

from dataclasses import dataclass

from app.exceptions import GateNotFound, NotFoundError, ValidationError
from app.models.access_log import AccessLog
from app.models.gate import Gate
from app.schemas.gate import GateOverrideRequest
from app.services.gate_controller import GateController
from app.services.repository import EntityRepository
from app.utils.logger import get_logger

logger = get_logger(__name__)

ACTION_TO_LOG = {"open": "entry", "close": "exit"}


@dataclass
class OverrideResult:
    gate: Gate
    log: AccessLog
    success: bool = True


async def apply_override(repo: EntityRepository, controller: GateController,
                         request: GateOverrideRequest) -> OverrideResult:
    reason = (request.reason or "").strip()
    if not reason:
        raise ValidationError("Reason is required for a manual override")
    if request.action not in ACTION_TO_LOG:
        raise ValidationError(f"Unsupported gate action: {request.action}")

    gate = repo.get("gate", request.gate_id)
    if gate is None:
        raise GateNotFound(request.gate_id)
    if repo.get("user", request.user_id) is None:
        raise NotFoundError("User not found")

    with repo.transaction():
        if request.action == "open":
            controller.open(repo, gate.id, auto_close=False)
        else:
            controller.close(repo, gate.id)
        log = repo.create("access_log", {
            "gate_id": gate.id,
            "user_id": request.user_id,
            "action": ACTION_TO_LOG[request.action],
            "auth_method": "manual_override",
            "status": "manual_override",
            "reason": reason,
            "processed_by": request.user_id,
        })

    logger.warning(f"[OVERRIDE] {gate.name} forced {request.action.upper()} "
                   f"by {request.user_id}: {reason}")
    return OverrideResult(gate=gate, log=log)
