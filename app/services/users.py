"""
Credential store — registration, credential checks and profile changes.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from app.core.exceptions import ErrorKind
from app.core.result import Err, Ok, Result
from app.core.security import PasswordHasher
from app.models.user import User

logger = logging.getLogger(__name__)

# Same message whether the email is unknown or the password is wrong
INVALID_CREDENTIALS = "Invalid email or password"


def normalise_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:
    def __init__(self, session: AsyncSession, hasher: PasswordHasher) -> None:
        self.session = session
        self.hasher = hasher

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str, *, with_password: bool = False) -> User | None:
        stmt = select(User).where(User.email == normalise_email(email))
        if with_password:
            stmt = stmt.options(undefer(User.hashed_password))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def register(
        self,
        name: str,
        email: str,
        raw_password: str,
        *,
        role: str = "user",
    ) -> Result[User]:
        email = normalise_email(email)
        if await self.get_by_email(email) is not None:
            return Err(ErrorKind.DUPLICATE_EMAIL, "Email already registered")

        user = User(
            name=name.strip(),
            email=email,
            hashed_password=await self.hasher.hash(raw_password),
            role=role,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await self.session.rollback()
            return Err(ErrorKind.DUPLICATE_EMAIL, "Email already registered")
        await self.session.refresh(user)
        logger.info("Registered user %d (%s)", user.id, user.email)
        return Ok(user)

    async def verify(self, email: str, raw_password: str) -> Result[User]:
        user = await self.get_by_email(email, with_password=True)
        if user is None:
            await self.hasher.dummy_verify()
            logger.info("Login failed: unknown email %s", normalise_email(email))
            return Err(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS)

        if not await self.hasher.verify(raw_password, user.hashed_password):
            logger.info("Login failed: wrong password for user %d", user.id)
            return Err(ErrorKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS)
        return Ok(user)

    async def update_profile(
        self,
        user_id: int,
        *,
        name: str | None = None,
        avatar: str | None = None,
        clear_avatar: bool = False,
        current_password: str | None = None,
        new_password: str | None = None,
    ) -> Result[User]:
        result = await self.session.execute(
            select(User).where(User.id == user_id).options(undefer(User.hashed_password))
        )
        user = result.scalar_one_or_none()
        if user is None:
            return Err(ErrorKind.USER_NOT_FOUND, "User not found")

        if new_password is not None:
            if current_password is None or not await self.hasher.verify(
                current_password, user.hashed_password
            ):
                return Err(
                    ErrorKind.VALIDATION_ERROR,
                    "Validation failed",
                    errors=[{"field": "current_password", "message": "Current password is incorrect"}],
                )
            user.hashed_password = await self.hasher.hash(new_password)
            logger.info("Password changed for user %d", user.id)

        if name is not None:
            user.name = name.strip()
        if avatar is not None or clear_avatar:
            user.avatar = avatar

        await self.session.commit()
        await self.session.refresh(user)
        return Ok(user)

    async def list_users(self) -> list[User]:
        result = await self.session.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())
