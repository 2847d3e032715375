"""
Post model — public blog content written by a single author.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, utcnow

CATEGORIES = ("technology", "lifestyle", "education", "business", "other")


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_author_created", "author_id", "created_at"),
        Index("ix_posts_published_created", "published", "created_at"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    body: str = Column(Text, nullable=False)  # type: ignore[assignment]
    author_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    category: str = Column(  # type: ignore[assignment]
        String(20), nullable=False, default="other", server_default="other"
    )
    tags: list[str] = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    views: int = Column(Integer, nullable=False, default=0, server_default="0")  # type: ignore[assignment]
    published: bool = Column(  # type: ignore[assignment]
        Boolean, nullable=False, default=True, server_default="true"
    )
    image: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )

    # Loaded eagerly: responses always embed the author summary
    author = relationship("User", back_populates="posts", lazy="joined")
