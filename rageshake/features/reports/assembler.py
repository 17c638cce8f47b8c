"""Reconstruct ordered log history across sessions for a bug report."""

from typing import List

import structlog

from rageshake.features.capture.buffer import LineBuffer
from rageshake.features.retention.service import RetentionManager
from rageshake.features.store.repository import LogStoreInterface
from rageshake.features.reports.schemas import ReportLog

logger = structlog.get_logger(__name__)


class ReportAssembler:
    """Reads persisted sessions and the unflushed buffer into report logs."""

    def __init__(
        self,
        store: LogStoreInterface,
        buffer: LineBuffer,
        retention: RetentionManager,
    ):
        self.store = store
        self.buffer = buffer
        self.retention = retention

    async def assemble(self, clear_after: bool = False) -> List[ReportLog]:
        """Collect every session's logs, oldest session first.

        The current session always comes last: its persisted chunks followed
        by the lines still in the buffer, which may be up to one flush
        interval newer than the store. The buffer is drained either way, so
        lines returned without ``clear_after`` are never persisted.

        Args:
            clear_after: Delete every session that was read, current session
                included, so the same lines are never sent twice.

        Returns:
            One entry per session, text never truncated.
        """
        current = self.store.session_id
        logs: List[ReportLog] = []
        current_persisted = ""

        if self.store.available:
            session_ids = await self.store.list_session_ids()
            for session_id in reversed(session_ids):
                if session_id == current:
                    continue
                lines = await self.store.read_session(session_id)
                logs.append(ReportLog(id=session_id, lines=lines))

            current_persisted = await self.store.read_session(current)

            if clear_after:
                read_ids = [log.id for log in logs] + [current]
                await self.retention.delete_sessions(read_ids)

        logs.append(ReportLog(id=current, lines=current_persisted + self.buffer.drain()))
        return logs
