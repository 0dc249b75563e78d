# app/services/authorization_engine.py
"""
Authorization engine - scan → decision → gate → audit record.

  code ──> credential_resolver ──> vehicle | visitor | unresolved
  vehicle:  active                            → grant
  visitor:  active and valid_from ≤ now ≤ valid_until → grant
  grant:    open first online gate (auto-close) + log entry/authorized, one unit of work
  reject:   log entry/denied, then raise AccessDenied
  unresolved: NotFoundError, nothing written

Every decision on a resolved credential leaves exactly one access-log row.
When no gate is online the grant is still logged and the outcome says so.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from app.exceptions import AccessDenied, NotFoundError, ValidationError
from app.models.access_log import AccessLog
from app.models.gate import Gate
from app.models.vehicle import Vehicle
from app.models.visitor import Visitor
from app.services.credential_resolver import (
    VEHICLE,
    VISITOR,
    ResolvedCredential,
    resolve_credential,
)
from app.services.gate_controller import GateController
from app.services.repository import EntityRepository
from app.utils.logger import get_logger

logger = get_logger(__name__)

NO_GATE_REASON = "no gate available"
VISITOR_DENIED_MESSAGE = "Visitor pass expired or inactive"


@dataclass
class ScanOutcome:
    credential_type: str          # vehicle | visitor
    authorized: bool
    message: str
    log: AccessLog
    gate: Optional[Gate] = None
    vehicle: Optional[Vehicle] = None
    visitor: Optional[Visitor] = None

    @property
    def gate_available(self) -> bool:
        return self.gate is not None

    @property
    def license_plate(self) -> Optional[str]:
        return self.vehicle.license_plate if self.vehicle else None


class AuthorizationEngine:
    def __init__(self, repo: EntityRepository, gate_controller: GateController,
                 clock: Optional[Callable] = None):
        self.repo = repo
        self.gates = gate_controller
        self.clock = clock or repo.clock

    async def scan(self, code: str) -> ScanOutcome:
        code = (code or "").strip()
        if not code:
            raise ValidationError("Code required")

        credential = resolve_credential(self.repo, code)
        if credential.kind == VEHICLE:
            return self._authorize_vehicle(credential)
        if credential.kind == VISITOR:
            return self._authorize_visitor(credential)

        logger.warning(f"[SCAN] Unrecognised code {code!r}")
        raise NotFoundError("Invalid code")

    def _authorize_vehicle(self, credential: ResolvedCredential) -> ScanOutcome:
        vehicle = credential.vehicle
        gate = self.repo.first_online_gate()
        who = {"vehicle_id": vehicle.id, "user_id": vehicle.user_id}

        if not vehicle.is_active:
            log = self._record(credential, gate, "denied", "inactive", **who)
            logger.warning(f"[SCAN] DENIED vehicle {vehicle.license_plate} - inactive")
            raise AccessDenied("Vehicle access denied - inactive", reason="inactive",
                               credential_type=VEHICLE, log_id=log.id)

        outcome = self._grant(credential, gate, "Access granted", **who)
        outcome.vehicle = vehicle
        logger.info(f"[SCAN] GRANTED vehicle {vehicle.license_plate} via {credential.auth_method} "
                    f"at {gate.name if gate else '(no gate)'}")
        return outcome

    def _authorize_visitor(self, credential: ResolvedCredential) -> ScanOutcome:
        visitor = credential.visitor
        gate = self.repo.first_online_gate()
        now = self.clock()

        if not visitor.is_valid_at(now):
            reason = _visitor_rejection(visitor, now)
            log = self._record(credential, gate, "denied", reason, visitor_id=visitor.id)
            logger.warning(f"[SCAN] DENIED visitor {visitor.full_name} - {reason}")
            raise AccessDenied(VISITOR_DENIED_MESSAGE, reason=reason,
                               credential_type=VISITOR, log_id=log.id)

        outcome = self._grant(credential, gate, "Visitor access granted", visitor_id=visitor.id)
        outcome.visitor = visitor
        logger.info(f"[SCAN] GRANTED visitor {visitor.full_name} "
                    f"at {gate.name if gate else '(no gate)'}")
        return outcome

    def _grant(self, credential: ResolvedCredential, gate: Optional[Gate], message: str, **who) -> ScanOutcome:
        with self.repo.transaction():
            if gate is not None:
                self.gates.open(self.repo, gate.id)
            log = self._record(credential, gate, "authorized", None if gate else NO_GATE_REASON, **who)

        if gate is None:
            message = f"{message} - {NO_GATE_REASON}"
        return ScanOutcome(credential.kind, True, message, log, gate=gate)

    def _record(self, credential: ResolvedCredential, gate: Optional[Gate], status: str,
                reason: Optional[str], **who) -> AccessLog:
        return self.repo.create("access_log", {
            "gate_id": gate.id if gate else None,
            "action": "entry",
            "auth_method": credential.auth_method,
            "status": status,
            "reason": reason,
            **who,
        })


def _visitor_rejection(visitor: Visitor, now) -> str:
    if not visitor.is_active:
        return "visitor pass inactive"
    if now < visitor.valid_from:
        return "visitor pass not yet valid"
    return "visitor pass expired"
