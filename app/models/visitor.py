# app/models/visitor.py
"""
Visitor passes table.
A pass carries a generated QR code and is honoured only while active and
inside its [valid_from, valid_until] window (both ends inclusive).
"""

import uuid
from sqlalchemy import Column, String, DateTime, Boolean
from app.database import Base
from app.utils.clock import utcnow


class Visitor(Base):
    __tablename__ = "visitors"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False, index=True)
    phone_number = Column(String(50), nullable=False)
    purpose = Column(String(500), nullable=False)
    host_name = Column(String(200), nullable=False)
    host_contact = Column(String(200), nullable=False)
    vehicle_plate = Column(String(50))
    qr_code = Column(String(100), unique=True, index=True)   # VISITOR-<id>
    valid_from = Column(DateTime, nullable=False)
    valid_until = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def is_valid_at(self, moment) -> bool:
        return bool(self.is_active) and self.valid_from <= moment <= self.valid_until

    def __repr__(self):
        return f"<Visitor {self.full_name} qr={self.qr_code} active={self.is_active}>"
