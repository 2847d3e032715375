"""Pydantic schemas for users, registration and profile updates."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

# Matches the users.email column width
EMAIL_MAX_LENGTH = 320


def _check_name(v: str) -> str:
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Name must be at least 2 characters long")
    if len(v) > 50:
        raise ValueError("Name cannot exceed 50 characters")
    return v


def _trim_email(v: object) -> object:
    if not isinstance(v, str):
        return v
    v = v.strip()
    if len(v) > EMAIL_MAX_LENGTH:
        raise ValueError(f"Email cannot exceed {EMAIL_MAX_LENGTH} characters")
    return v


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("email", mode="before")
    @classmethod
    def _trim(cls, v: object) -> object:
        return _trim_email(v)

    @field_validator("email")
    @classmethod
    def _fold_case(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: str
    avatar: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class AuthorSummary(BaseModel):
    id: int
    name: str
    email: str
    avatar: str | None = None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    name: str | None = None
    avatar: str | None = Field(default=None, max_length=500)
    current_password: str | None = None
    new_password: str | None = Field(default=None, min_length=6, max_length=72)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Name cannot be null")
        return _check_name(v)
