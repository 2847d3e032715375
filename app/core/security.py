"""
Password hashing (bcrypt) and JWT bearer tokens.

Both services are built once from :class:`~app.core.config.Settings` by
``create_app`` and kept on ``app.state``; nothing here reads the global
settings object directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.exceptions import ErrorKind
from app.core.result import Err, Ok, Result


# ── Passwords ───────────────────────────────────────────────────────
class PasswordHasher:
    """Salted bcrypt hashing with a tunable cost factor.

    bcrypt is CPU bound, so the async methods run it in the threadpool.
    """

    def __init__(self, rounds: int = 10) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash_sync(self, plain: str) -> str:
        return self._context.hash(plain)

    def verify_sync(self, plain: str, hashed: str) -> bool:
        return self._context.verify(plain, hashed)

    async def hash(self, plain: str) -> str:
        return await run_in_threadpool(self._context.hash, plain)

    async def verify(self, plain: str, hashed: str) -> bool:
        return await run_in_threadpool(self._context.verify, plain, hashed)

    async def dummy_verify(self) -> None:
        """Burn one verification's worth of time for unknown accounts."""
        await run_in_threadpool(self._context.dummy_verify)


# ── JWT tokens ──────────────────────────────────────────────────────
@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    name: str
    role: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and verifies signed, expiring bearer tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(days=7),
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self.expires_delta = expires_delta

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def issue(self, user: Any, expires_delta: timedelta | None = None) -> str:
        """Sign a token for *user* (anything with id, email, name and role)."""
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.expires_delta)
        payload = {
            "sub": str(user.id),
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.role,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Result[TokenClaims]:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            return Err(ErrorKind.TOKEN_EXPIRED, "Token expired, please login again")
        except JWTError:
            return Err(ErrorKind.TOKEN_MALFORMED, "Invalid token")

        try:
            claims = TokenClaims(
                user_id=int(payload["sub"]),
                email=str(payload["email"]),
                name=str(payload["name"]),
                role=str(payload["role"]),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError):
            return Err(ErrorKind.TOKEN_MALFORMED, "Invalid token")
        return Ok(claims)
