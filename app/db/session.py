"""Async database engine and session handling.

Engines are created lazily, one per database URL, so the API, the scripts
and the test suite can point at different databases in one process.
"""

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel, select

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

_engines: dict[str, AsyncEngine] = {}
_session_makers: dict[str, async_sessionmaker[AsyncSession]] = {}


def get_engine(settings: Settings | None = None) -> AsyncEngine:
    """Return the engine for ``settings.database_url``, creating it on first use."""
    settings = settings or get_settings()
    url = settings.database_url

    engine = _engines.get(url)
    if engine is not None:
        return engine

    options: dict = {"echo": settings.log_level == "DEBUG", "pool_pre_ping": True}
    # SQLite pools do not accept sizing arguments
    if not settings.is_sqlite:
        options.update(pool_size=10, max_overflow=20)

    try:
        engine = create_async_engine(url, **options)
    except Exception as e:
        logger.error(f"Could not create engine for {url}: {e}", exc_info=True)
        raise

    logger.info(f"Created database engine ({engine.dialect.name})")
    _engines[url] = engine
    return engine


def get_session_maker(settings: Settings | None = None) -> async_sessionmaker[AsyncSession]:
    """Return the session factory bound to the engine for ``settings``."""
    settings = settings or get_settings()
    url = settings.database_url

    if url not in _session_makers:
        _session_makers[url] = async_sessionmaker(
            get_engine(settings),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _session_makers[url]


async def create_all_tables(settings: Settings | None = None) -> None:
    """Create every SQLModel table that does not exist yet."""
    from app.db import models  # noqa: F401

    engine = get_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    logger.info("Database tables ready")


async def drop_all_tables(settings: Settings | None = None) -> None:
    """Drop every SQLModel table. All templates and prompts are lost."""
    from app.db import models  # noqa: F401

    engine = get_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    logger.warning("All database tables dropped")


async def init_db(settings: Settings | None = None) -> None:
    """Create tables and store the default system prompt if none exists.

    Args:
        settings: Optional settings. If None, uses global settings.
    """
    from app.db.models import SystemPrompt

    settings = settings or get_settings()
    await create_all_tables(settings)

    async with get_session_maker(settings)() as session:
        result = await session.execute(select(SystemPrompt).limit(1))
        if result.scalars().first() is not None:
            return

        session.add(SystemPrompt(content=settings.default_system_prompt))
        try:
            await session.commit()
        except Exception as e:
            logger.error(f"Seeding the system prompt failed: {e}", exc_info=True)
            await session.rollback()
            raise

        logger.info("Seeded default system prompt")


async def close_db(settings: Settings | None = None) -> None:
    """Dispose of the engine for ``settings`` and forget its session factory."""
    url = (settings or get_settings()).database_url

    _session_makers.pop(url, None)
    engine = _engines.pop(url, None)
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
