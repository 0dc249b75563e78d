# app/models/gate.py
"""
Gates table - physical access points.
status (online | offline | maintenance) is operational; is_open is the barrier state.
Rows are mutated on every open/close and never deleted.
"""

import uuid
from sqlalchemy import Column, String, DateTime, Boolean
from app.database import Base
from app.utils.clock import utcnow

GATE_STATUSES = ("online", "offline", "maintenance")


class Gate(Base):
    __tablename__ = "gates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    location = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="online")
    is_open = Column(Boolean, default=False, nullable=False)
    last_activity = Column(DateTime)
    assigned_officer = Column(String(36))                 # users.id of the officer on duty
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<Gate {self.name} status={self.status} open={self.is_open}>"
