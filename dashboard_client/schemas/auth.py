"""Pydantic schemas for authentication payloads."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict


class LoginRequest(BaseModel):
    """Credentials submitted to the login endpoint."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Session payload returned by a successful login."""

    model_config = ConfigDict(extra="allow")

    token: str
