"""
boilerplate.infra.database.engine – Async SQLAlchemy 2.0 engine, session factory, init/close.

Accepts DatabaseConfig; if not provided, loads from env via load_database_config().
The engine connects lazily, so building it never touches the database.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

# Ensure all ORM models are registered with Base.metadata before create_all()
import boilerplate.infra.database.models  # noqa: F401
from boilerplate.infra.database.models.base import Base

if TYPE_CHECKING:
    from boilerplate.config import DatabaseConfig

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _resolve_config(config: Optional["DatabaseConfig"]) -> "DatabaseConfig":
    if config is None:
        from boilerplate.config import load_database_config
        config = load_database_config()
    return config


def build_engine(
    config: Optional["DatabaseConfig"] = None,
    *,
    echo: Optional[bool] = None,
    use_null_pool: bool = False,
) -> AsyncEngine:
    """
    Create and cache the async SQLAlchemy engine.

    Args:
        config: DatabaseConfig (url, pool_size, etc.). If None, loaded from env.
        echo: Override SQL echo (default: use config.echo).
        use_null_pool: Use NullPool (e.g. for tests).
    """
    global _engine
    if _engine is not None:
        return _engine

    config = _resolve_config(config)
    url = config.async_url
    do_echo = echo if echo is not None else config.echo

    if use_null_pool or config.is_sqlite:
        _engine = create_async_engine(url, echo=do_echo, poolclass=NullPool)
        logger.info("AsyncEngine created with NullPool")
    else:
        _engine = create_async_engine(
            url,
            echo=do_echo,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            pool_pre_ping=True,
        )
        logger.info(
            "AsyncEngine created: pool_size=%d max_overflow=%d",
            config.pool_size, config.max_overflow,
        )
    return _engine


def build_session_factory(
    engine: Optional[AsyncEngine] = None,
) -> async_sessionmaker[AsyncSession]:
    """Create async session factory bound to engine."""
    global _session_factory
    if _session_factory is not None:
        return _session_factory
    if engine is None:
        engine = build_engine()
    _session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.debug("AsyncSessionFactory created")
    return _session_factory


async def init_db(
    config: Optional["DatabaseConfig"] = None,
    *,
    drop_all: bool = False,
) -> None:
    """Create all ORM tables. For dev/test only; use migrations in production."""
    engine = build_engine(_resolve_config(config))
    async with engine.begin() as conn:
        if drop_all:
            logger.warning("Dropping all ORM tables (drop_all=True)")
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Creating ORM tables")
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialised successfully")


async def close_engine() -> None:
    """Dispose the connection pool. Call on app shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("AsyncEngine disposed")
        _engine = None
        _session_factory = None
