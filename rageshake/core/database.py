"""Database connection and session management for the SQLite log store using SQLAlchemy with async support."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from .config import get_global_settings


class DatabaseManager:
    """Database connection and session manager."""

    def __init__(self, database_url: Optional[str] = None, echo: Optional[bool] = None):
        """Initialize database manager with async engine."""
        settings = get_global_settings()
        self.database_url = database_url or settings.database_url

        _ensure_sqlite_directory(self.database_url)

        self.engine: AsyncEngine = create_async_engine(
            self.database_url,
            echo=settings.debug if echo is None else echo,
            future=True,
        )

        # Create async session factory
        self.async_session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session with proper cleanup."""
        async with self.async_session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def close(self) -> None:
        """Close database connections."""
        await self.engine.dispose()


def _ensure_sqlite_directory(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite") or not url.database:
        return
    if url.database == ":memory:":
        return
    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
