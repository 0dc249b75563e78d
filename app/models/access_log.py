# app/models/access_log.py
"""
Access log table - the audit trail.
One row per authorization decision (granted or denied) and per manual override.
Rows are append-only: any flush that would UPDATE or DELETE one is refused.
"""

import uuid
from sqlalchemy import Column, String, DateTime, Text, event
from sqlalchemy.orm import object_session
from app.database import Base
from app.exceptions import ImmutableRecordError
from app.utils.clock import utcnow

ACCESS_ACTIONS = ("entry", "exit")
AUTH_METHODS = ("qr_code", "rfid", "manual_override")
ACCESS_STATUSES = ("authorized", "denied", "manual_override")


class AccessLog(Base):
    __tablename__ = "access_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    vehicle_id = Column(String(36), index=True)         # empty for overrides / visitor passes
    user_id = Column(String(36), index=True)            # vehicle owner or acting officer
    visitor_id = Column(String(36), index=True)         # set for visitor-pass decisions
    gate_id = Column(String(36), index=True)            # empty when no gate was available
    timestamp = Column(DateTime, nullable=False, default=utcnow, index=True)
    action = Column(String(10), nullable=False)         # entry | exit
    auth_method = Column(String(20), nullable=False)    # qr_code | rfid | manual_override
    status = Column(String(20), nullable=False, index=True)  # authorized | denied | manual_override
    reason = Column(Text)
    processed_by = Column(String(36))                   # officer who processed the event

    def __repr__(self):
        return f"<AccessLog {self.id} {self.action} {self.status} via={self.auth_method}>"


@event.listens_for(AccessLog, "before_update")
def _refuse_update(mapper, connection, target):
    session = object_session(target)
    if session is not None and not session.is_modified(target, include_collections=False):
        return
    raise ImmutableRecordError(f"Access log {target.id} is immutable")


@event.listens_for(AccessLog, "before_delete")
def _refuse_delete(mapper, connection, target):
    raise ImmutableRecordError(f"Access log {target.id} cannot be deleted")
