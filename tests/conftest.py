"""
Shared fixtures: an in-memory SQLite database and the services built on it.
"""

from __future__ import annotations

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from api.dependencies import get_settings
from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from auth.service import Authenticator
from config.settings import Settings
from database.session import build_engine, get_db_session, init_db
from tasks.store import TaskStore
from users.directory import UserDirectory
from utils.schemas import SignupRequest


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret="test-secret", jwt_expiry_seconds=86400, bcrypt_rounds=4)


@pytest_asyncio.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def hasher(settings) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture
def tokens(settings) -> TokenIssuer:
    return TokenIssuer(settings)


@pytest.fixture
def directory(session, hasher) -> UserDirectory:
    return UserDirectory(session, hasher)


@pytest.fixture
def authenticator(directory, hasher, tokens) -> Authenticator:
    return Authenticator(directory, hasher, tokens)


@pytest.fixture
def store(session) -> TaskStore:
    return TaskStore(session)


@pytest.fixture
def make_user(authenticator):
    """Sign up a user; ``name`` doubles as username and email local part."""

    async def _make(name: str, password: str = "password123", **extra):
        return await authenticator.signup(
            SignupRequest(
                username=name,
                email=f"{name}@example.com",
                password=password,
                **extra,
            )
        )

    return _make


@pytest_asyncio.fixture
async def client(session_factory, settings):
    from main import create_app

    app = create_app()

    async def _test_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_session
    app.dependency_overrides[get_settings] = lambda: settings

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
