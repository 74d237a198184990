"""Async engine, session factory and transaction boundary."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.config import settings
from app.domain.errors import TransientStorageError

logger = logging.getLogger(__name__)

# SQLSTATEs a caller may safely retry: serialization failure, deadlock
TRANSIENT_SQLSTATES = {"40001", "40P01"}


class Base(DeclarativeBase):
    pass


engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    isolation_level=settings.db_isolation_level,
    connect_args={
        "server_settings": {"statement_timeout": str(settings.db_statement_timeout_ms)}
    },
)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request."""
    async with async_session_factory() as session:
        yield session


def is_transient(exc: DBAPIError) -> bool:
    if exc.connection_invalidated:
        return True
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    sqlstate = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
    return sqlstate in TRANSIENT_SQLSTATES


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit on success, roll back everything on any error.

    Driver errors that are safe to retry surface as TransientStorageError;
    nothing is retried here.
    """
    try:
        yield session
        await session.commit()
    except DBAPIError as e:
        await session.rollback()
        if is_transient(e):
            logger.warning("Transient storage failure, transaction rolled back: %s", e.orig)
            raise TransientStorageError("Storage temporarily unavailable, please retry") from e
        raise
    except BaseException:
        await session.rollback()
        raise
