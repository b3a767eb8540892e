from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict
from uuid import uuid4

from sqlalchemy import pool, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from common.core.config import Settings
from common.core.otel_axiom_exporter import get_logger
from common.db.base import Base
from common.db.scoped import get_session, transaction

logger = get_logger(__name__)


def async_database_url(settings: Settings) -> str:
    # Replace postgresql:// with postgresql+asyncpg:// for async support
    return settings.database_url.replace("postgresql://", "postgresql+asyncpg://")


def engine_options(settings: Settings) -> Dict[str, Any]:
    """Engine keyword arguments for the configured pool mode."""
    engine_kwargs: Dict[str, Any] = {
        "echo": settings.debug,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "connect_args": {
            "prepared_statement_name_func": lambda: f"__asyncpg_{uuid4()}__",
        },
    }

    # NullPool: new connection per operation (one-off jobs, migrations)
    if settings.db_use_nullpool:
        logger.info("Using NullPool - no connection pooling")
        engine_kwargs["poolclass"] = pool.NullPool
    else:
        logger.info(
            f"Using connection pooling - pool_size={settings.db_pool_size}, max_overflow={settings.db_pool_overflow}"
        )
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["max_overflow"] = settings.db_pool_overflow
    return engine_kwargs


class Database:
    """Owns the async engine and session factory for one process.

    Built by the entry point (``from_settings``) or by tests around their own
    engine; repositories receive it through their constructors.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine = create_async_engine(
            async_database_url(settings), **engine_options(settings)
        )
        return cls(engine)

    @classmethod
    def from_url(cls, url: str, **engine_kwargs: Any) -> "Database":
        return cls(create_async_engine(url, **engine_kwargs))

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session for one operation; joins the current transaction if any."""
        async with get_session(self.session_factory) as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Atomic unit of work; nested calls join the outermost block."""
        async with transaction(self.session_factory) as session:
            yield session

    async def ping(self) -> bool:
        async with self.session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True

    async def create_all(self) -> None:
        """Create all tables; used by tests and local runs, not by deployments."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")
