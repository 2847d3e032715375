"""Pydantic schemas for Post CRUD, listing and search."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.schemas.user import AuthorSummary

Category = Literal["technology", "lifestyle", "education", "business", "other"]


def _check_title(v: str) -> str:
    v = v.strip()
    if len(v) < 3:
        raise ValueError("Title must be at least 3 characters long")
    if len(v) > 200:
        raise ValueError("Title cannot exceed 200 characters")
    return v


def _check_body(v: str) -> str:
    v = v.strip()
    if len(v) < 10:
        raise ValueError("Post body must be at least 10 characters long")
    if len(v) > 5000:
        raise ValueError("Post body cannot exceed 5000 characters")
    return v


def _lower_tags(v: object) -> object:
    if v is None:
        return []
    if not isinstance(v, list):
        return v
    return [t.strip().lower() if isinstance(t, str) else t for t in v if not (isinstance(t, str) and not t.strip())]


class PostCreate(BaseModel):
    title: str
    body: str
    category: Category = "other"
    tags: list[str] = Field(default_factory=list)
    image: str | None = Field(default=None, max_length=500)
    published: bool = True

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v: str) -> str:
        return _check_title(v)

    @field_validator("body")
    @classmethod
    def _validate_body(cls, v: str) -> str:
        return _check_body(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _validate_tags(cls, v: object) -> object:
        return _lower_tags(v)


class PostUpdate(BaseModel):
    """Partial update; ``image: null`` removes the image."""

    title: str | None = None
    body: str | None = None
    category: Category | None = None
    tags: list[str] | None = None
    image: str | None = Field(default=None, max_length=500)
    published: bool | None = None

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("Title cannot be null")
        return _check_title(v)

    @field_validator("body")
    @classmethod
    def _validate_body(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("Post body cannot be null")
        return _check_body(v)

    @field_validator("category", "published")
    @classmethod
    def _not_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _validate_tags(cls, v: object) -> object:
        return _lower_tags(v)


class PostRead(BaseModel):
    id: int
    title: str
    body: str
    author_id: int
    author: AuthorSummary | None = None
    category: str
    tags: list[str]
    views: int
    published: bool
    image: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class PostDetail(PostRead):
    is_author: bool = False


class SearchResult(PostRead):
    score: float


class PaginationRead(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool

    model_config = {"from_attributes": True}


class PostPage(BaseModel):
    posts: list[PostRead]
    pagination: PaginationRead


class PostSearchResults(BaseModel):
    query: str
    posts: list[SearchResult]
