"""Periodic flush of buffered log lines to the store."""

from typing import Awaitable, Callable, Optional

import structlog
from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.schedulers.asyncio import AsyncIOScheduler

logger = structlog.get_logger(__name__)

FLUSH_JOB_ID = "rageshake_flush"


class FlushScheduler:
    """Runs a flush coroutine on a fixed interval inside the running event loop."""

    def __init__(self, flush: Callable[[], Awaitable[None]], interval_seconds: int):
        """Initialize the scheduler.

        Args:
            flush: Coroutine function moving buffered lines into the store.
            interval_seconds: Seconds between flushes.
        """
        self.flush = flush
        self.interval_seconds = interval_seconds
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Start the interval job. Must be called from within the event loop."""
        if self._scheduler is not None:
            logger.warning("Flush scheduler already started")
            return

        self._scheduler = AsyncIOScheduler(
            executors={"default": AsyncIOExecutor()},
            job_defaults={
                "coalesce": True,  # Combine missed runs into one
                "max_instances": 1,  # Never two flushes at once
                "misfire_grace_time": self.interval_seconds,
            },
            timezone="UTC",
        )
        self._scheduler.add_job(
            self.flush,
            trigger="interval",
            seconds=self.interval_seconds,
            id=FLUSH_JOB_ID,
            name="Flush captured logs",
            replace_existing=True,
        )
        self._scheduler.start()

        logger.info("Flush scheduler started", interval_seconds=self.interval_seconds)

    def shutdown(self) -> None:
        """Stop the interval job without waiting for a running flush."""
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Flush scheduler shut down")
