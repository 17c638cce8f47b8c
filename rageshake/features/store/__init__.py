"""Store feature: durable, session-keyed log chunks."""

from .models import Base, LogChunk
from .repository import LogStoreInterface, SQLAlchemyLogStore
from .session_ids import SESSION_PREFIX, new_session_id, session_sort_key

__all__ = [
    "Base",
    "LogChunk",
    "LogStoreInterface",
    "SQLAlchemyLogStore",
    "SESSION_PREFIX",
    "new_session_id",
    "session_sort_key",
]
