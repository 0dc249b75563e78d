# app/models/vehicle.py
"""
Registered vehicles table.
Each vehicle belongs to one user and carries two system-generated credentials
(QR code + RFID tag) that the gate scanners resolve back to the vehicle.
"""

import uuid
from sqlalchemy import Column, String, DateTime, Boolean
from app.database import Base
from app.utils.clock import utcnow


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)      # owner (users.id)
    license_plate = Column(String(50), unique=True, nullable=False, index=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    color = Column(String(50), nullable=False)
    rfid_tag = Column(String(100), unique=True, index=True)       # RFID-xxxxxxxx
    qr_code = Column(String(100), unique=True, index=True)        # QR-<id>
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Vehicle {self.license_plate} owner={self.user_id} active={self.is_active}>"
