# app/schemas/user.py
from datetime import datetime
from typing import Literal, Optional
from pydantic import field_validator
from app.schemas.base import CamelModel, not_null

Role = Literal["admin", "security_officer", "student_staff", "visitor"]


class UserCreate(CamelModel):
    username: str
    password: str
    role: Role
    full_name: str
    email: str
    phone_number: Optional[str] = None


class UserUpdate(CamelModel):
    password: Optional[str] = None
    role: Optional[Role] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator("password", "role", "full_name", "email", mode="before")
    @classmethod
    def keep_required(cls, v):
        return not_null(v)


class UserOut(CamelModel):
    id: str
    username: str
    role: str
    full_name: str
    email: str
    phone_number: Optional[str]
    created_at: datetime


class LoginRequest(CamelModel):
    username: str
    password: str
