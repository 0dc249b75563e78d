# app/schemas/visitor.py
from datetime import datetime
from typing import Optional
from pydantic import field_validator, model_validator
from app.schemas.base import CamelModel
from app.utils.clock import to_naive_utc


class VisitorCreate(CamelModel):
    full_name: str
    email: str
    phone_number: str
    purpose: str
    host_name: str
    host_contact: str
    vehicle_plate: Optional[str] = None
    valid_from: datetime
    valid_until: datetime
    is_active: bool = True

    @field_validator("valid_from", "valid_until")
    @classmethod
    def as_naive_utc(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def window_is_ordered(self):
        if self.valid_until < self.valid_from:
            raise ValueError("validUntil must not be earlier than validFrom")
        return self


class VisitorOut(CamelModel):
    id: str
    full_name: str
    email: str
    phone_number: str
    purpose: str
    host_name: str
    host_contact: str
    vehicle_plate: Optional[str]
    qr_code: str
    valid_from: datetime
    valid_until: datetime
    is_active: bool
    created_at: datetime
