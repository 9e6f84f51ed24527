"""
Database engine and session management.

The engine and session factory are built once at application startup,
kept on ``app.state.db`` and disposed at shutdown. Routes obtain sessions
through the ``get_session`` dependency.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from binderbase.models.db import Base


class Database:
    """Owns the async engine and the session factory bound to it."""

    def __init__(self, url: str, echo: bool = False) -> None:
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, pool_pre_ping=True)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def init_db(self) -> None:
        """
        Initialize database tables.

        Creates all tables defined in the ORM models.
        Should be called once at application startup.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a request-scoped session from the factory on ``app.state.db``.

    Commits when the route returns normally and rolls back on a store
    error. Services may commit earlier; the final commit is then a no-op.
    """
    db: Database = request.app.state.db
    async with db.session_factory() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise
