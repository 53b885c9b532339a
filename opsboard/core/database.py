# opsboard/core/database.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, InvalidRequestError, NoSuchModuleError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from opsboard.core.exceptions import ConfigurationError
from opsboard.models.model import Base

logger = logging.getLogger(__name__)

# Async drivers and the sync driver Alembic should use for the same database
SYNC_DRIVERS = {
    "mysql+aiomysql": "mysql+pymysql",
    "mysql+asyncmy": "mysql+pymysql",
    "postgresql+asyncpg": "postgresql+psycopg2",
    "postgresql+psycopg_async": "postgresql+psycopg",
    "sqlite+aiosqlite": "sqlite",
}


def parse_database_url(database_url: Optional[str]) -> URL:
    if not database_url or not database_url.strip():
        raise ConfigurationError("DATABASE_URL is required for the SQL storage backend")
    try:
        return make_url(database_url.strip())
    except ArgumentError as e:
        raise ConfigurationError(f"Invalid DATABASE_URL: {str(e)}") from e


def get_sync_database_url(database_url: str) -> str:
    url = parse_database_url(database_url)
    sync_driver = SYNC_DRIVERS.get(url.drivername)
    if sync_driver:
        url = url.set(drivername=sync_driver)
    return url.render_as_string(hide_password=False)


def create_engine_from_url(
    database_url: Optional[str],
    echo: bool = False,
    pool_size: int = 20,
    max_overflow: int = 10,
) -> AsyncEngine:
    url = parse_database_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    engine_kwargs = {"echo": echo}
    if not is_sqlite:
        engine_kwargs.update(
            pool_pre_ping=True,
            pool_size=pool_size,
            max_overflow=max_overflow,
        )

    try:
        engine = create_async_engine(url, **engine_kwargs)
    except (ArgumentError, NoSuchModuleError, InvalidRequestError) as e:
        raise ConfigurationError(f"Cannot create engine for {url.drivername}: {str(e)}") from e
    except ImportError as e:
        raise ConfigurationError(f"Database driver for {url.drivername} is not installed: {str(e)}") from e

    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    logger.info(f"Database engine created for {url.render_as_string(hide_password=True)}")
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(session_factory: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    session = session_factory()
    try:
        yield session
        await session.commit()
    except Exception as e:
        await session.rollback()
        logger.error(f"DB session error: {str(e)}")
        raise
    finally:
        await session.close()


async def init_db(engine: AsyncEngine) -> None:
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error(f"Database initialization error: {str(e)}")
        raise

    logger.info("Database ready")


async def close_db(engine: AsyncEngine) -> None:
    await engine.dispose()
    logger.info("Database connections closed")
