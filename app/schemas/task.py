"""Pydantic schemas for Task CRUD."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, computed_field, field_validator

Priority = Literal["low", "medium", "high"]


def _check_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Task text cannot be empty")
    if len(v) > 500:
        raise ValueError("Task text cannot exceed 500 characters")
    return v


def _clean_tags(v: object) -> object:
    if v is None:
        return []
    if not isinstance(v, list):
        return v
    return [t.strip() if isinstance(t, str) else t for t in v if not (isinstance(t, str) and not t.strip())]


class TaskCreate(BaseModel):
    text: str
    priority: Priority = "medium"
    due_date: datetime | None = Field(default=None, alias="dueDate")
    tags: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @field_validator("text")
    @classmethod
    def _validate_text(cls, v: str) -> str:
        return _check_text(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _validate_tags(cls, v: object) -> object:
        return _clean_tags(v)


class TaskUpdate(BaseModel):
    """Partial update: only keys present in the request body are applied.

    ``dueDate: null`` clears the due date; ``tags: null`` clears the tags.
    """

    text: str | None = None
    completed: bool | None = None
    priority: Priority | None = None
    due_date: datetime | None = Field(default=None, alias="dueDate")
    tags: list[str] | None = None

    model_config = {"populate_by_name": True}

    @field_validator("text")
    @classmethod
    def _validate_text(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("Task text cannot be null")
        return _check_text(v)

    @field_validator("completed", "priority")
    @classmethod
    def _not_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _validate_tags(cls, v: object) -> object:
        return _clean_tags(v)


class TaskRead(BaseModel):
    id: int
    text: str
    completed: bool
    user_id: int
    priority: str
    due_date: datetime | None = None
    tags: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def age_days(self) -> int:
        """Days since creation, rounded up."""
        if self.created_at is None:
            return 0
        created = self.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        elapsed = (datetime.now(timezone.utc) - created).total_seconds()
        return math.ceil(abs(elapsed) / 86400)


class TaskStatsRead(BaseModel):
    total: int
    completed: int
    active: int

    model_config = {"from_attributes": True}


class DeleteResponse(BaseModel):
    success: bool
    message: str
