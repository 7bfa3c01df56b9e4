"""
Database Configuration.

Lazily built async engine and session factory for the note store. Nothing
touches config/.env or database.yaml until the first session is requested,
so importing the app never fails on missing secrets.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _create_engine() -> AsyncEngine:
    from modules.backend.core.config import get_app_config, get_database_url

    db_config = get_app_config().database
    url = make_url(get_database_url())

    # SQLite has no server-side pool to size
    pool_options = {}
    if url.get_backend_name() != "sqlite":
        pool_options = {
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.pool_recycle,
            "pool_pre_ping": True,
        }

    engine = create_async_engine(url, echo=db_config.echo, **pool_options)
    logger.debug(
        "Database engine created",
        extra={"backend": url.get_backend_name(), "database": url.database},
    )
    return engine


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Sessions keep loaded notes usable after commit (expire_on_commit=False)."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency: one session per request.

    Commits when the route returns normally and rolls back on any
    exception, so a failed lifecycle operation leaves no partial write.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close pooled connections on shutdown; the next session rebuilds the engine."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.debug("Database engine disposed")
    _engine = None
    _async_session_factory = None
