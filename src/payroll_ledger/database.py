"""Database engine and session factory for the durable store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_ledger.models import Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


def create_engine_for_url(url: str, connect_timeout: float = 5.0) -> AsyncEngine:
    """Create an async engine for a store URL.

    In-memory SQLite gets a single shared connection so every session sees
    the same database.
    """
    kwargs: dict[str, Any] = {"echo": False, "pool_pre_ping": True}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"timeout": connect_timeout}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_size"] = 5
        kwargs["max_overflow"] = 10
        if url.startswith("postgresql+asyncpg"):
            kwargs["connect_args"] = {"timeout": connect_timeout}

    return create_async_engine(url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used by the SQL store."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create ledger tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
