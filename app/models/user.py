# app/models/user.py
"""
Users table - everyone who can own a vehicle, sponsor a visitor or operate a gate.
Role is one of: admin | security_officer | student_staff | visitor.
"""

import uuid
from sqlalchemy import Column, String, DateTime
from app.database import Base
from app.utils.clock import utcnow

USER_ROLES = ("admin", "security_officer", "student_staff", "visitor")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(200), nullable=False)
    role = Column(String(30), nullable=False)
    full_name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False, index=True)
    phone_number = Column(String(50))
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<User {self.username} role={self.role}>"
