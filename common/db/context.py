"""
Database session context management.

A transaction() block publishes its session in a context variable so that
every repository call made inside the block (in the same task) joins it
instead of opening its own session:

    async with db.transaction():
        await accounts.upsert(...)
        await allowances.get_or_initialize(...)  # same session, commits together

The session is stored together with the session factory that opened it, so
two Database instances never leak sessions into each other.
"""

from contextvars import ContextVar, Token
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

_ScopedSession = Tuple[async_sessionmaker, AsyncSession]

# Holds (factory, session) while inside a transaction() block
_current_session: ContextVar[Optional[_ScopedSession]] = ContextVar(
    "db_current_session", default=None
)


def get_current_session(factory: async_sessionmaker) -> Optional[AsyncSession]:
    """
    Get the transaction session opened by ``factory`` in this context, if any.

    Returns:
        The current session if inside a transaction, None otherwise.
    """
    scoped = _current_session.get()
    if scoped is None:
        return None
    owner, session = scoped
    if owner is not factory:
        return None
    return session


def set_current_session(
    factory: async_sessionmaker, session: AsyncSession
) -> Token:
    """Publish a transaction session; returns the token for reset."""
    return _current_session.set((factory, session))


def reset_current_session(token: Token) -> None:
    _current_session.reset(token)


def in_transaction(factory: async_sessionmaker) -> bool:
    """Check if we're currently inside a transaction opened by ``factory``."""
    return get_current_session(factory) is not None
