"""
Reset the database and load sample users, tasks and posts.

Run with::

    python -m app.db.seed
"""

from __future__ import annotations

import asyncio
import logging

from app.core.config import settings
from app.core.result import unwrap
from app.core.security import PasswordHasher
from app.db.session import build_engine, build_session_factory, create_tables, drop_tables
from app.services.posts import PostRepository
from app.services.tasks import TaskRepository
from app.services.users import CredentialStore

logger = logging.getLogger("app.db.seed")

SAMPLE_USERS = [
    {"name": "John Doe", "email": "john@example.com", "password": "password123", "role": "admin"},
    {"name": "Jane Smith", "email": "jane@example.com", "password": "password123", "role": "user"},
    {"name": "Bob Johnson", "email": "bob@example.com", "password": "password123", "role": "user"},
]

SAMPLE_TASKS = [
    {"text": "Complete React assignment", "priority": "high", "tags": ["school", "react"]},
    {"text": "Review pull requests", "priority": "medium", "tags": ["work"]},
    {"text": "Buy groceries", "priority": "low", "tags": ["personal"]},
]

SAMPLE_POSTS = [
    {
        "title": "Getting Started with FastAPI",
        "body": "FastAPI makes it easy to build typed, async web APIs in Python.",
        "category": "technology",
        "tags": ["python", "fastapi"],
    },
    {
        "title": "Morning Routines That Stick",
        "body": "Small habits, repeated daily, beat ambitious plans that fade in a week.",
        "category": "lifestyle",
        "tags": ["habits"],
    },
    {
        "title": "Learning SQL the Practical Way",
        "body": "Start from real questions about your data and let the queries follow.",
        "category": "education",
        "tags": ["sql", "databases"],
    },
]


async def seed() -> None:
    engine = build_engine(settings.DATABASE_URL)
    await drop_tables(engine)
    await create_tables(engine)
    logger.info("🗑️  Cleared existing data")

    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    async with build_session_factory(engine)() as session:
        store = CredentialStore(session, hasher)
        tasks = TaskRepository(session)
        posts = PostRepository(session)

        users = []
        for sample in SAMPLE_USERS:
            user = unwrap(
                await store.register(
                    sample["name"], sample["email"], sample["password"], role=sample["role"]
                )
            )
            users.append(user)
        logger.info("👤 Created %d users", len(users))

        for i, fields in enumerate(SAMPLE_TASKS):
            await tasks.create(users[i % len(users)].id, {**fields, "completed": i == 0})
        logger.info("✅ Created %d tasks", len(SAMPLE_TASKS))

        for i, fields in enumerate(SAMPLE_POSTS):
            await posts.create(users[i % len(users)].id, fields)
        logger.info("📝 Created %d posts", len(SAMPLE_POSTS))

    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    asyncio.run(seed())
