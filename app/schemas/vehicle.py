# app/schemas/vehicle.py
from datetime import datetime
from typing import Optional
from pydantic import field_validator
from app.schemas.base import CamelModel, not_null


class VehicleCreate(CamelModel):
    user_id: str
    license_plate: str
    make: str
    model: str
    color: str
    is_active: bool = True

    @field_validator("license_plate")
    @classmethod
    def normalise_plate(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("license plate must not be empty")
        return v


class VehicleUpdate(CamelModel):
    license_plate: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("license_plate", "make", "model", "color", "is_active", mode="before")
    @classmethod
    def keep_required(cls, v):
        return not_null(v)

    @field_validator("license_plate")
    @classmethod
    def normalise_plate(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("license plate must not be empty")
        return v


class VehicleOut(CamelModel):
    id: str
    user_id: str
    license_plate: str
    make: str
    model: str
    color: str
    rfid_tag: str
    qr_code: str
    is_active: bool
    created_at: datetime
