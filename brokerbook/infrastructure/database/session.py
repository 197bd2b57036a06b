"""SQLAlchemy engine and session lifecycle, owned by an explicit Database handle."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from brokerbook.infrastructure.database.base import Base
from brokerbook.infrastructure.database.errors import storage_errors


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Database:
    """Engine + session factory, created at startup and disposed at shutdown.

    Passed explicitly to whatever needs a session; there is no module-level
    engine.
    """

    def __init__(self, url: str, *, echo: bool = False):
        self.url = _get_async_url(url)
        self.engine = create_async_engine(self.url, echo=echo, future=True)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """Create every table registered on ``Base`` (idempotent)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """One unit of work: commit on success, roll back on any error."""
        async with self.session_factory() as session:
            try:
                yield session
                with storage_errors("commit the transaction"):
                    await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        await self.engine.dispose()
