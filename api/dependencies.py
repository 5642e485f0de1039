"""
FastAPI dependencies (shared across routes).

Each service is composed explicitly from its collaborators for the
lifetime of one request.
"""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from auth.service import Authenticator
from config.settings import Settings, config
from database.session import get_db_session
from tasks.store import TaskStore
from users.directory import UserDirectory


async def db_session(session: AsyncSession = Depends(get_db_session)) -> AsyncGenerator[AsyncSession, None]:
    """Re-export so routes import from a single place."""
    yield session


def get_settings() -> Settings:
    return config


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


def get_token_issuer(settings: Settings = Depends(get_settings)) -> TokenIssuer:
    return TokenIssuer(settings)


def get_user_directory(
    session: AsyncSession = Depends(db_session),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> UserDirectory:
    return UserDirectory(session, hasher)


def get_authenticator(
    directory: UserDirectory = Depends(get_user_directory),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> Authenticator:
    return Authenticator(directory, hasher, tokens)


def get_task_store(session: AsyncSession = Depends(db_session)) -> TaskStore:
    return TaskStore(session)
