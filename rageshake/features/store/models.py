"""Log chunk model for the durable log store."""

from datetime import datetime

from sqlalchemy import DateTime as SQLDateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Declarative base for log store tables."""

    pass


class LogChunk(Base):
    """An immutable block of flushed log lines belonging to one session.

    Keys look like ``("instance-1484827160051-9f86d081", 0)``. Listing
    sessions queries every chunk with ``sequence == 0`` and reading a session
    queries by ``session_id``, hence an index on each key column.
    """

    __tablename__ = "logs"
    __table_args__ = (
        Index("ix_logs_session_id", "session_id"),
        Index("ix_logs_sequence", "sequence"),
    )

    session_id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Id of the application instance that wrote this chunk",
    )

    sequence: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
        comment="Position of the chunk within its session, starting at 0",
    )

    lines: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Newline-delimited log lines",
    )

    created_at: Mapped[datetime] = mapped_column(
        SQLDateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        """Return string representation of the chunk."""
        return (
            f"<LogChunk(session_id='{self.session_id}', sequence={self.sequence}, "
            f"size={len(self.lines or '')})>"
        )
