"""Durable log store keyed by session id and sequence number.

Every application instance writes under its own session id, so several
instances can share one database without coordinating. Each operation runs
in its own transaction; nothing here spans more than one.
"""

import asyncio
from typing import List, Optional, Protocol

import structlog
from sqlalchemy import delete, func, inspect, select
from sqlalchemy.exc import SQLAlchemyError

from rageshake.core.config import get_global_settings
from rageshake.core.database import DatabaseManager
from rageshake.core.decorators import store_operation
from rageshake.core.exceptions import (
    StoreOperationError,
    StoreUnavailableError,
)
from rageshake.features.capture.patcher import iso_timestamp
from rageshake.features.store.models import Base, LogChunk
from rageshake.features.store.session_ids import session_sort_key

logger = structlog.get_logger(__name__)


class LogStoreInterface(Protocol):
    """Repository interface for persisted log chunks"""

    session_id: str

    @property
    def available(self) -> bool:
        """Whether the store has been opened"""
        ...

    async def open(self) -> None:
        """Open or create the durable store"""
        ...

    async def append(self, session_id: str, text: str) -> None:
        """Persist text as the next chunk of a session"""
        ...

    async def list_session_ids(self) -> List[str]:
        """Sessions with a first chunk, newest first"""
        ...

    async def read_session(self, session_id: str) -> str:
        """All chunks of a session concatenated in sequence order"""
        ...

    async def delete_session(self, session_id: str) -> None:
        """Remove every chunk of a session"""
        ...

    async def close(self) -> None:
        """Release the underlying medium"""
        ...


def _create_schema(connection) -> bool:
    """Create the log table if needed; return True if it did not exist."""
    existed = inspect(connection).has_table(LogChunk.__tablename__)
    Base.metadata.create_all(connection, checkfirst=True)
    return not existed


class SQLAlchemyLogStore:
    """SQLAlchemy implementation of the log store"""

    def __init__(self, session_id: str, database_url: Optional[str] = None):
        self.session_id = session_id
        self.database_url = database_url or get_global_settings().database_url
        self.db: Optional[DatabaseManager] = None
        # Serializes sequence allocation of appends made through this handle
        self._sequence_lock = asyncio.Lock()

    @property
    def available(self) -> bool:
        return self.db is not None

    async def open(self) -> None:
        """Open the database, creating the schema on first use.

        The first time the database is created a sentinel chunk is written
        for this session.

        :raises StoreUnavailableError: If the database cannot be opened
        """
        if self.db is not None:
            return

        try:
            db = DatabaseManager(self.database_url)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to open log database", error=str(e))
            raise StoreUnavailableError(
                f"Failed to open log database: {e}",
                operation="open",
                original_error=e,
            ) from e

        try:
            async with db.engine.begin() as conn:
                created = await conn.run_sync(_create_schema)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to open log database", error=str(e))
            await db.close()
            raise StoreUnavailableError(
                f"Failed to open log database: {e}",
                operation="open",
                original_error=e,
            ) from e

        self.db = db
        logger.info("Log database opened", session_id=self.session_id, created=created)

        if created:
            try:
                await self.append(
                    self.session_id,
                    f"{iso_timestamp()} ::: Log database was created.\n",
                )
            except StoreOperationError:
                # The store itself is usable; only the marker is missing
                pass

    def _require_db(self, operation: str) -> DatabaseManager:
        if self.db is None:
            raise StoreUnavailableError("No connected database", operation=operation)
        return self.db

    @store_operation("append")
    async def append(self, session_id: str, text: str) -> None:
        """Persist text as the next chunk of the session. Empty text is a no-op.

        The sequence number is read from the database on every append, so a
        session cleared by another instance starts again at 0.
        """
        if not text:
            return
        db = self._require_db("append")

        # Held across the insert so a failed write never leaves a gap
        async with self._sequence_lock:
            async with db.get_session() as session:
                result = await session.execute(
                    select(func.max(LogChunk.sequence)).where(
                        LogChunk.session_id == session_id
                    )
                )
                current = result.scalar_one_or_none()
                sequence = 0 if current is None else current + 1

                session.add(
                    LogChunk(session_id=session_id, sequence=sequence, lines=text)
                )
                await session.commit()

    @store_operation("list")
    async def list_session_ids(self) -> List[str]:
        """Return every session with a sequence-0 chunk, newest first."""
        db = self._require_db("list")
        async with db.get_session() as session:
            result = await session.execute(
                select(LogChunk.session_id).where(LogChunk.sequence == 0).distinct()
            )
            session_ids = list(result.scalars().all())
        return sorted(session_ids, key=session_sort_key, reverse=True)

    @store_operation("read")
    async def read_session(self, session_id: str) -> str:
        """Return the session's chunks concatenated in sequence order."""
        db = self._require_db("read")
        async with db.get_session() as session:
            result = await session.execute(
                select(LogChunk.sequence, LogChunk.lines).where(
                    LogChunk.session_id == session_id
                )
            )
            rows = result.all()
        # Physical row order is not sequence order
        rows.sort(key=lambda row: row.sequence)
        return "".join(row.lines for row in rows)

    @store_operation("delete")
    async def delete_session(self, session_id: str) -> None:
        """Remove every chunk of the session. A session with no chunks is a no-op."""
        db = self._require_db("delete")
        async with self._sequence_lock:
            async with db.get_session() as session:
                await session.execute(
                    delete(LogChunk).where(LogChunk.session_id == session_id)
                )
                await session.commit()

    async def close(self) -> None:
        """Dispose of the engine."""
        if self.db is not None:
            await self.db.close()
            self.db = None
