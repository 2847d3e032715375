"""
Windowed pagination over an ordered SELECT.

``skip = (page - 1) * limit``; a page past the end is an empty window,
never an error. Callers are responsible for capping ``limit``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageInfo:
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool

    @classmethod
    def build(cls, request: PageRequest, returned: int, total: int) -> "PageInfo":
        return cls(
            page=request.page,
            limit=request.limit,
            total=total,
            total_pages=math.ceil(total / request.limit),
            has_more=request.skip + returned < total,
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    info: PageInfo


async def count_rows(session: AsyncSession, stmt: Select[Any]) -> int:
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    return (await session.execute(count_stmt)).scalar_one()


async def paginate(
    session: AsyncSession,
    stmt: Select[Any],
    request: PageRequest,
) -> Page[Any]:
    """Run *stmt* (already filtered and ordered) as one page plus a total count."""
    total = await count_rows(session, stmt)
    result = await session.execute(stmt.offset(request.skip).limit(request.limit))
    items = list(result.unique().scalars().all())
    return Page(items=items, info=PageInfo.build(request, len(items), total))
