"""Pydantic schemas for issued bearer tokens."""

from __future__ import annotations

from pydantic import BaseModel

from app.schemas.user import UserRead


class AuthResponse(BaseModel):
    user: UserRead
    token: str
    token_type: str = "bearer"
