"""
Task model — a to-do item owned by exactly one user.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base, utcnow

PRIORITIES = ("low", "medium", "high")


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_user_completed", "user_id", "completed"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    text: str = Column(String(500), nullable=False)  # type: ignore[assignment]
    completed: bool = Column(  # type: ignore[assignment]
        Boolean, nullable=False, default=False, server_default="false"
    )
    user_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    priority: str = Column(  # type: ignore[assignment]
        String(10), nullable=False, default="medium", server_default="medium"
    )  # low | medium | high
    due_date: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    tags: list[str] = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True), default=utcnow, index=True
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    owner = relationship("User", back_populates="tasks")
