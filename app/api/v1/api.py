"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, posts, tasks

api_router = APIRouter()

# Registration, login, profile, admin user listing
api_router.include_router(auth.router)

# Per-user tasks
api_router.include_router(tasks.router)

# Blog posts: public listing / search, author-scoped writes
api_router.include_router(posts.router)
