# app/routers/health.py
"""Liveness for the dashboard and load balancer: database reachability plus gate state."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_gate_controller
from app.models.gate import Gate
from app.services.gate_controller import GateController
from app.utils.clock import utcnow

router = APIRouter()


@router.get("/health", summary="Backend, database and gate-timer status")
def health_check(db: Session = Depends(get_db), controller: GateController = Depends(get_gate_controller)):
    report = {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "database": "ok",
        "gatesOnline": None,
        "pendingAutoClose": controller.pending_count(),
    }

    try:
        db.execute(text("SELECT 1"))
        report["gatesOnline"] = db.query(Gate).filter(Gate.status == "online").count()
    except SQLAlchemyError as e:
        report["database"] = f"error: {e}"
        report["status"] = "degraded"

    return report
