"""
User directory — lookups, creation with uniqueness checks, profile updates.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.password import PasswordHasher
from core.errors import ConflictError, NotFoundError
from database.models import User

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("password", "about", "avatar")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


class UserDirectory:
    def __init__(self, session: AsyncSession, hasher: PasswordHasher) -> None:
        self.session = session
        self.hasher = hasher

    async def _find_one_by(self, *criteria) -> Optional[User]:
        result = await self.session.execute(select(User).where(*criteria))
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._find_one_by(User.email == email)

    async def find_by_username(self, username: str) -> Optional[User]:
        return await self._find_one_by(User.username == username)

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get(self, user_id: int) -> User:
        user = await self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    async def ensure_available(self, username: str, email: str) -> None:
        if await self.find_by_username(username) is not None:
            raise ConflictError("username already exists")
        if await self.find_by_email(email) is not None:
            raise ConflictError("email already exists")

    async def create(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        about: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> User:
        """
        Persist a new user.

        The existence checks are a fast path; the unique constraints on
        ``users.username`` / ``users.email`` are authoritative, so an
        ``IntegrityError`` from a concurrent signup is reported as the same
        conflict.
        """
        await self.ensure_available(username, email)

        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            about=_blank_to_none(about),
            avatar=_blank_to_none(avatar),
        )
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Unique constraint hit for username=%s, re-classifying", username)
            await self.ensure_available(username, email)
            raise
        await self.session.refresh(user)
        return user

    async def update(self, user_id: int, patch: Mapping[str, Any]) -> User:
        """
        Apply the profile fields present in ``patch``.

        Omitted keys leave the field unchanged; an empty ``about`` / ``avatar``
        clears it.
        """
        user = await self.get(user_id)

        if patch.get("password"):
            user.password_hash = self.hasher.hash(patch["password"])
        if "about" in patch:
            user.about = _blank_to_none(patch["about"])
        if "avatar" in patch:
            user.avatar = _blank_to_none(patch["avatar"])

        await self.session.flush()
        await self.session.refresh(user)
        changed = [name for name in PROFILE_FIELDS if name in patch]
        logger.info("Updated profile of user %s (%s)", user.id, ", ".join(changed))
        return user
