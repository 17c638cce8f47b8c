"""
Retention of persisted logs.

Keeps the store bounded: the newest sessions are kept until their combined
size exceeds the budget, everything from that session back is deleted.
"""

import asyncio
from typing import List

import structlog

from rageshake.core.exceptions import StoreError
from rageshake.features.store.repository import LogStoreInterface

logger = structlog.get_logger(__name__)


class RetentionManager:
    """Deletes old sessions once the store grows past a byte budget."""

    def __init__(self, store: LogStoreInterface):
        """
        Initialize the retention manager.

        Args:
            store: Log store shared with the rest of the service
        """
        self.store = store

    async def prune(
        self, budget_bytes: int, include_current_session: bool = False
    ) -> List[str]:
        """
        Delete sessions that do not fit in the budget.

        Sessions are walked newest first, summing their text length. The first
        session that takes the total over ``budget_bytes`` is deleted together
        with every older one. The current session is only deleted when
        ``include_current_session`` is set, in which case every session goes.

        Args:
            budget_bytes: Maximum total size of kept log text
            include_current_session: Delete everything, current session included

        Returns:
            Ids of the sessions that were deleted
        """
        if not self.store.available:
            return []

        session_ids = await self.store.list_session_ids()
        current = self.store.session_id

        if include_current_session:
            remove_ids = list(session_ids)
            if current not in remove_ids:
                remove_ids.append(current)
        else:
            remove_ids = await self._over_budget(session_ids, budget_bytes)
            remove_ids = [sid for sid in remove_ids if sid != current]

        if not remove_ids:
            return []

        return await self.delete_sessions(remove_ids)

    async def _over_budget(
        self, session_ids: List[str], budget_bytes: int
    ) -> List[str]:
        size = 0
        for i, session_id in enumerate(session_ids):
            size += len(await self.store.read_session(session_id))
            if size > budget_bytes:
                return session_ids[i:]
        return []

    async def delete_sessions(self, session_ids: List[str]) -> List[str]:
        """
        Delete sessions concurrently, skipping the ones that fail.

        Args:
            session_ids: Sessions to delete

        Returns:
            Ids of the sessions that were deleted
        """
        logger.info("Removing logs", session_ids=session_ids)

        results = await asyncio.gather(
            *(self.store.delete_session(sid) for sid in session_ids),
            return_exceptions=True,
        )

        removed: List[str] = []
        for session_id, result in zip(session_ids, results):
            if isinstance(result, StoreError):
                logger.warning(
                    "Failed to delete logs",
                    session_id=session_id,
                    error=str(result),
                )
                continue
            if isinstance(result, BaseException):
                raise result
            removed.append(session_id)

        logger.info("Removed old logs", count=len(removed))
        return removed
