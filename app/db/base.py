"""
Declarative base shared by every ORM model.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    # Models use classic Column() assignments with plain annotations
    __allow_unmapped__ = True
