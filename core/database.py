"""
Meal Planner Database Configuration
Async database setup with SQLAlchemy 2.0
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import MetaData, event, text
from sqlalchemy.pool import StaticPool
from contextlib import asynccontextmanager
import structlog
from typing import AsyncGenerator, Optional

from core.config import settings

logger = structlog.get_logger()

# Database engine
engine: Optional[AsyncEngine] = None
async_session_factory: Optional[async_sessionmaker] = None


class Base(DeclarativeBase):
    """Base class for all database models"""

    metadata = MetaData(
        naming_convention={
            "ix": "ix_%(column_0_label)s",
            "uq": "uq_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
            "pk": "pk_%(table_name)s"
        }
    )


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"echo": settings.DEBUG}
        if ":memory:" in url:
            # One shared connection, otherwise every checkout sees an empty database
            options.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
        return options
    return {
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
        "pool_pre_ping": True,
        "pool_recycle": 3600,  # 1 hour
        "echo": settings.DEBUG,
    }


def _enable_sqlite_savepoints(async_engine: AsyncEngine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINT works on the sqlite driver"""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


async def init_db(url: Optional[str] = None, create_all: Optional[bool] = None) -> None:
    """Initialize database connection and optionally create tables"""
    global engine, async_session_factory

    database_url = url or settings.database_url_async
    if create_all is None:
        create_all = settings.DATABASE_CREATE_ALL

    try:
        engine = create_async_engine(database_url, **_engine_options(database_url))
        if engine.dialect.name == "sqlite":
            _enable_sqlite_savepoints(engine)

        async_session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        async with engine.begin() as conn:
            if create_all:
                # Import models so they register with the metadata
                import models  # noqa: F401
                await conn.run_sync(Base.metadata.create_all)
            else:
                await conn.run_sync(lambda _: None)

        logger.info("Database connection initialized successfully", create_all=create_all)

    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise


async def close_db() -> None:
    """Close database connections"""
    global engine, async_session_factory

    if engine:
        await engine.dispose()
        engine = None
        async_session_factory = None
        logger.info("Database connections closed")


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions

    One session is one unit of work: it commits when the block exits
    normally and rolls back everything written inside it on any exception.
    """
    if not async_session_factory:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.warning("Database session rolled back", error=str(e), error_type=type(e).__name__)
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for FastAPI to get database session
    """
    async with get_db_session() as session:
        yield session


class DatabaseHealthCheck:
    """Database health check utilities"""

    @staticmethod
    async def check_connection() -> bool:
        """Check if database connection is healthy"""
        try:
            async with get_db_session() as session:
                result = await session.execute(text("SELECT 1"))
                return result.scalar() == 1
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return False


__all__ = [
    "Base",
    "init_db",
    "close_db",
    "get_db_session",
    "get_db",
    "DatabaseHealthCheck"
]
