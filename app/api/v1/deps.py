"""
FastAPI dependencies — database session, injected services and auth guards.

Authentication runs as a small state machine per request::

    UNAUTHENTICATED --token present--> RESOLVING --user found--> AUTHENTICATED
                                           |
                                           +--bad token / user gone--> REJECTED

The outcome is an explicit :class:`AuthContext` handed to the endpoint.
Nothing is cached between requests: every call re-verifies the token and
re-loads the user, so a deleted account is refused on its next request.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import AppError, ErrorKind
from app.core.result import Err
from app.core.security import PasswordHasher, TokenService
from app.models.user import User
from app.services.posts import PostRepository
from app.services.tasks import TaskRepository
from app.services.users import CredentialStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# ── Database session ────────────────────────────────────────────────
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Injected services (built once in create_app) ────────────────────
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_credential_store(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> CredentialStore:
    return CredentialStore(db, hasher)


def get_task_repository(db: AsyncSession = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)


def get_post_repository(db: AsyncSession = Depends(get_db)) -> PostRepository:
    return PostRepository(db)


# ── Auth state machine ──────────────────────────────────────────────
class AuthState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"


@dataclass
class AuthContext:
    state: AuthState = AuthState.UNAUTHENTICATED
    user: User | None = None
    reason: Err | None = None

    @property
    def user_id(self) -> int | None:
        return self.user.id if self.user is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def require_user(self) -> User:
        """The authenticated user, or the rejection as an :class:`AppError`."""
        if self.state is AuthState.AUTHENTICATED and self.user is not None:
            return self.user
        reason = self.reason or Err(ErrorKind.TOKEN_MISSING, "No token provided, authorization denied")
        raise reason.to_error()

    def reject(self, kind: ErrorKind, message: str) -> "AuthContext":
        self.state = AuthState.REJECTED
        self.user = None
        self.reason = Err(kind, message)
        return self


async def authenticate(
    token: str | None,
    tokens: TokenService,
    store: CredentialStore,
) -> AuthContext:
    """Resolve a raw bearer token to an :class:`AuthContext`. Never raises."""
    ctx = AuthContext()
    if not token:
        return ctx.reject(ErrorKind.TOKEN_MISSING, "No token provided, authorization denied")

    ctx.state = AuthState.RESOLVING
    verified = tokens.verify(token)
    if isinstance(verified, Err):
        logger.info("Token rejected: %s", verified.kind)
        ctx.state = AuthState.REJECTED
        ctx.reason = verified
        return ctx

    user = await store.get_by_id(verified.value.user_id)
    if user is None:
        logger.info("Token for missing user %d rejected", verified.value.user_id)
        return ctx.reject(ErrorKind.USER_NOT_FOUND, "User not found, token invalid")

    ctx.state = AuthState.AUTHENTICATED
    ctx.user = user
    return ctx


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
    store: CredentialStore = Depends(get_credential_store),
) -> AuthContext:
    token = credentials.credentials if credentials is not None else None
    return await authenticate(token, tokens, store)


async def get_current_user(ctx: AuthContext = Depends(get_auth_context)) -> User:
    """Mandatory auth: anything but AUTHENTICATED is a 401."""
    return ctx.require_user()


async def get_optional_user(ctx: AuthContext = Depends(get_auth_context)) -> User | None:
    """Optional auth: failures silently fall back to an anonymous caller."""
    return ctx.user if ctx.is_authenticated else None


def require_role(role: str) -> Callable[..., Awaitable[User]]:
    """Role gate, evaluated only after authentication succeeded."""

    async def _require_role(user: User = Depends(get_current_user)) -> User:
        if user.role != role:
            raise AppError(ErrorKind.FORBIDDEN, f"Access denied: {role} privileges required")
        return user

    return _require_role


require_admin = require_role("admin")
