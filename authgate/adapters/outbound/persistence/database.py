# authgate/adapters/outbound/persistence/database.py (async version)

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from sqlalchemy import BigInteger, Integer
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

# Configure logger
logger = logging.getLogger(__name__)

# ─── Base definition ───────────────────────────────────────────────────────────
# Parent class of every ORM model, holds the metadata
Base = declarative_base()

# 64-bit ids; SQLite only autoincrements INTEGER primary keys
IdType = BigInteger().with_variant(Integer, "sqlite")
# ────────────────────────────────────────────────────────────────────────────────


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine. No connection is opened until first use."""
    url = make_url(database_url)
    options = {"echo": echo, "pool_pre_ping": True}
    if url.get_backend_name() != "sqlite":
        options.update(pool_size=20, max_overflow=10, pool_timeout=30, pool_recycle=1800)

    engine = create_async_engine(url, **options)
    logger.info(f"Async database engine configured for: {url.render_as_string(hide_password=True).split('@')[-1]}")
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create database tables if they don't exist."""
    # Register every model on the metadata
    from authgate.adapters.outbound.persistence import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables verified")


@asynccontextmanager
async def session_scope(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides an async context for database operations,
    committing on success and rolling back on error.

    Example:
        ```python
        async with session_scope(session_factory) as db:
            db.add(user)
        ```
    """
    session = session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
