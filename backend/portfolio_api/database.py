"""
Portfolio Backend: Database Engine & Session Factory
======================================================

What:  Builds the async SQLAlchemy engine and session factory from Settings.
Why:   The engine is the one long-lived, shared handle to the store. It is
       built explicitly by the application factory and handed to the
       PersistenceGateway, instead of living in module-level state.
How:   create_async_engine with connection pooling; async_sessionmaker with
       expire_on_commit=False so mapped rows stay readable after commit.

Connection Pooling Strategy:
    pool_size / max_overflow:  sized for low-volume personal-site traffic
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections every hour
    SQLite (tests) uses SQLAlchemy's default pool; sizing options are skipped.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from portfolio_api.config import Settings


class Base(DeclarativeBase):
    """Base class for all ORM models (reviews, projects)."""
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Pool sizing only applies to server databases; the SQLite driver used in
    tests rejects those arguments.
    """
    options: Dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    if settings.database_url.startswith("postgresql+asyncpg"):
        # asyncpg connect timeout, so a dead host fails fast at startup
        options["connect_args"] = {"timeout": settings.db_query_timeout}

    return create_async_engine(settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the shared engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create the reviews and projects tables if they do not exist.

    Production tables are provisioned out-of-band; this is used for local
    SQLite databases and the test suite.
    """
    # Registers the models on Base.metadata
    from portfolio_api.models import project, review  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
