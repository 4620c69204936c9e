from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class AdminSignup(BaseModel):
    email: str
    password: str
    name: str | None = None


class AdminLogin(BaseModel):
    email: str
    password: str


class AdminUpdate(BaseModel):
    email: str | None = None
    name: str | None = None
    password: str | None = None


class AdminResponse(BaseModel):
    """Public view of an admin; the password hash is never included."""

    id: str
    email: str
    name: str = ""
    created_at: datetime | None = None

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class AdminEnvelope(BaseModel):
    admin: AdminResponse


class AuthResponse(BaseModel):
    token: str
    admin: AdminResponse
