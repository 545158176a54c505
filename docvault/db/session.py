"""
Async SQLAlchemy engine and session factory.

Nothing is created at import time; callers build an engine and pass
the session factory to SQLDocumentStore explicitly.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from docvault.core.config import settings


def make_engine(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """Create an async engine, defaulting to settings.DATABASE_URL."""
    url = url or settings.DATABASE_URL
    kwargs = {"pool_pre_ping": True}
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=20, max_overflow=10)

    return create_async_engine(
        url,
        echo=settings.DATABASE_ECHO if echo is None else echo,
        **kwargs,
    )


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to `engine`."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
