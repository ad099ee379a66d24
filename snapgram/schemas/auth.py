"""Pydantic records for authentication state and forms."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


class AuthUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str


class AuthSession(BaseModel):
    """Refreshable snapshot of an authenticated session."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    access_token: str
    expires_at: datetime
    user: AuthUser


class AuthChange(BaseModel):
    """Session-change notification; ``session`` is ``None`` after sign-out."""

    model_config = ConfigDict(frozen=True)

    event: AuthEvent
    session_id: UUID
    session: AuthSession | None = None


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    username: str = Field(..., min_length=3, max_length=32, pattern=r"^[A-Za-z0-9_.]+$")
    full_name: str | None = Field(default=None, max_length=150)


__all__ = ["AuthEvent", "AuthUser", "AuthSession", "AuthChange", "SignInRequest", "SignUpRequest"]
