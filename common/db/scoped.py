"""
Operation-scoped database sessions.

Sessions are acquired lazily and released right after each operation, so no
connection is held while the engines wait on the billing gateway or a lock.

Usage:
    # Single operation - acquires and releases immediately
    async with get_session(factory) as session:
        result = await session.get(Model, id)

    # Multiple operations in a transaction - share one session
    async with transaction(factory):
        await repo.save(thing1)
        await repo.save(thing2)
    # Commits together, then releases

Prefer the Database wrapper in common/db/session.py, which binds the factory.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from common.core.otel_axiom_exporter import get_logger
from common.db.context import (
    get_current_session,
    set_current_session,
    reset_current_session,
)

logger = get_logger(__name__)


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Explicit transaction boundary.

    All DB operations inside share one session/connection. Commits on
    success, rolls back on exception. A nested transaction() joins the
    outer one: it neither commits nor rolls back, the outermost block does.

    Raises:
        Exception: Re-raises any exception after rollback
    """
    existing = get_current_session(session_factory)
    if existing is not None:
        logger.debug("Joining existing transaction session")
        yield existing
        return

    start = time.perf_counter()
    async with session_factory() as session:
        acquire_time = time.perf_counter() - start
        logger.debug(f"Transaction session acquire: {acquire_time * 1000:.2f}ms")

        token = set_current_session(session_factory, session)
        try:
            yield session
            commit_start = time.perf_counter()
            await session.commit()
            commit_time = time.perf_counter() - commit_start
            logger.debug(f"Transaction commit: {commit_time * 1000:.2f}ms")
        except Exception as e:
            logger.error(f"Transaction rollback due to: {e}")
            await session.rollback()
            raise
        finally:
            reset_current_session(token)


@asynccontextmanager
async def get_session(
    session_factory: async_sessionmaker,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Get a session for a single DB operation.

    Reuses the session of an enclosing transaction() block. Otherwise acquires
    a new session, commits on success and releases it immediately.
    """
    existing = get_current_session(session_factory)

    if existing is not None:
        # Inside a transaction - reuse session, the transaction commits
        yield existing
        return

    start = time.perf_counter()
    async with session_factory() as session:
        acquire_time = time.perf_counter() - start
        logger.debug(f"Operation session acquire: {acquire_time * 1000:.2f}ms")

        try:
            yield session
            commit_start = time.perf_counter()
            await session.commit()
            commit_time = time.perf_counter() - commit_start
            logger.debug(f"Operation commit: {commit_time * 1000:.2f}ms")
        except Exception as e:
            logger.error(f"Operation rollback due to: {e}")
            await session.rollback()
            raise
