# app/dependencies.py
"""FastAPI dependencies shared by the routers."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.gate_controller import GateController
from app.services.repository import EntityRepository


def get_repository(db: Session = Depends(get_db)) -> EntityRepository:
    return EntityRepository(db)


def get_gate_controller(request: Request) -> GateController:
    """The process-wide controller built at startup (owns the auto-close timers)."""
    return request.app.state.gate_controller
