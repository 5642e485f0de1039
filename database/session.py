"""
Async SQLAlchemy session factory (SQLite via aiosqlite, PostgreSQL via asyncpg).
"""

from __future__ import annotations

from typing import Any, AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import config
from database.models import Base


def _unicode_lower(value: Optional[Any]) -> Optional[Any]:
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(bind: AsyncEngine) -> None:
    """
    Replace SQLite's ASCII-only ``lower()`` with a Unicode-aware one on every
    new connection, so ``func.lower`` folds "É" the way ``str.lower`` does.
    """

    @event.listens_for(bind.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower)


def build_engine(database_url: str, **engine_kwargs) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        sqlite_engine = create_async_engine(database_url, echo=False, **engine_kwargs)
        register_sqlite_functions(sqlite_engine)
        return sqlite_engine
    return create_async_engine(
        database_url,
        echo=False,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        **engine_kwargs,
    )


engine = build_engine(config.database_url)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create all tables that do not exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
