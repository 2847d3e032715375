"""
Auth endpoints — registration, login, profile and admin user listing.
"""

import logging

from fastapi import APIRouter, Depends, Request

from app.api.v1.deps import (get_credential_store, get_current_user, get_token_service,
                             require_admin)
from app.core.config import settings
from app.core.rate_limit import limiter
from app.core.result import unwrap
from app.core.security import TokenService
from app.models.user import User
from app.schemas.token import AuthResponse
from app.schemas.user import LoginRequest, ProfileUpdate, UserCreate, UserRead
from app.services.users import CredentialStore

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def _auth_response(user: User, tokens: TokenService) -> AuthResponse:
    return AuthResponse(user=UserRead.model_validate(user), token=tokens.issue(user))


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def register(
    request: Request,
    body: UserCreate,
    store: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
) -> AuthResponse:
    """Create an account and return it with a fresh token."""
    user = unwrap(await store.register(body.name, body.email, body.password))
    return _auth_response(user, tokens)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(
    request: Request,
    body: LoginRequest,
    store: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
) -> AuthResponse:
    """Exchange email + password for a bearer token."""
    user = unwrap(await store.verify(body.email, body.password))
    logger.info("User %d logged in", user.id)
    return _auth_response(user, tokens)


@router.get("/me", response_model=UserRead)
async def read_current_user(current_user: User = Depends(get_current_user)) -> User:
    """Return profile of the currently authenticated user."""
    return current_user


@router.put("/profile", response_model=UserRead)
async def update_profile(
    body: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    store: CredentialStore = Depends(get_credential_store),
) -> User:
    """Change name or avatar; changing the password requires the current one."""
    sent = body.model_fields_set
    return unwrap(
        await store.update_profile(
            current_user.id,
            name=body.name,
            avatar=body.avatar,
            clear_avatar="avatar" in sent and body.avatar is None,
            current_password=body.current_password,
            new_password=body.new_password,
        )
    )


# ── User management (admin-only) ───────────────────────────────────
@router.get("/users", response_model=list[UserRead])
async def list_users(
    _admin: User = Depends(require_admin),
    store: CredentialStore = Depends(get_credential_store),
) -> list[User]:
    return await store.list_users()
