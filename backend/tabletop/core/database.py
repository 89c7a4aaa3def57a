"""Database configuration and session management"""

import logging
from typing import AsyncGenerator

from sqlalchemy import Enum as SAEnum, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from tabletop.config import settings

logger = logging.getLogger(__name__)

# Create base class for models
Base = declarative_base()


def status_enum(enum_cls) -> SAEnum:
    """String-backed enum column type storing member values, not names"""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [member.value for member in members],
    )


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite needs foreign keys switched on per connection for ON DELETE CASCADE"""
    if "sqlite" in type(dbapi_connection).__module__:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine_from_settings() -> AsyncEngine:
    url = settings.get_database_url()
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.DEBUG)
    return create_async_engine(
        url,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=30,
        pool_recycle=3600,
        pool_pre_ping=True,
        echo=settings.DEBUG
    )


engine = create_engine_from_settings()

# Create session factory
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

# Import models after Base is defined so metadata is populated.
from tabletop import models  # noqa: E402,F401


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting database session

    Yields:
        AsyncSession: Database session bound to the request
    """
    async with SessionLocal() as db:
        yield db


async def init_db() -> None:
    """
    Initialize database according to configured strategy.

    DB_INIT_MODE:
      - migrate: require alembic_version table (migration-first discipline)
      - create_all: bootstrap tables directly, for local development
      - off: skip initialization check
    """
    mode = settings.DB_INIT_MODE.lower().strip()
    if mode == "off":
        logger.info("DB initialization check skipped (DB_INIT_MODE=off)")
        return

    if mode == "create_all":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.warning("Using create_all database initialization (recommended only for local development).")
        return

    if mode == "migrate":
        async with engine.connect() as conn:
            table_names = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
            exists = "alembic_version" in table_names
            if settings.DB_REQUIRE_HEAD and not exists:
                raise RuntimeError(
                    "Migration table missing. Run Alembic migrations before starting the API."
                )
        logger.info("Migration metadata detected.")
        return

    raise RuntimeError(f"Unknown DB_INIT_MODE: {settings.DB_INIT_MODE}")


async def ping_db() -> None:
    async with SessionLocal() as db:
        await db.execute(text("SELECT 1"))
