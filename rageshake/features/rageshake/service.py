"""Long-lived capture context: the host application's entry point.

One ``Rageshake`` is created at startup and passed to whatever needs to
flush, clean up or send a report. Console-level output of the configured
surface is captured into an in-memory buffer and periodically flushed to a
SQLite database, so a bug report can include the logs of previous runs.
When the database cannot be opened, logs are kept in memory only and can
still be submitted.
"""

import asyncio
import logging
from typing import Any, List, Mapping, Optional

import structlog

from rageshake.core.config import Settings, get_global_settings
from rageshake.core.exceptions import StoreError, StoreUnavailableError
from rageshake.features.capture import (
    ConsoleCapture,
    ConsolePatcher,
    LineBuffer,
    LineBufferHandler,
    LineBufferProcessor,
)
from rageshake.features.rageshake.scheduler import FlushScheduler
from rageshake.features.reports import (
    AppPlatform,
    BugReport,
    BugReportGateway,
    DefaultPlatform,
    ReportAssembler,
    ReportService,
)
from rageshake.features.retention import RetentionManager
from rageshake.features.store import (
    LogStoreInterface,
    SQLAlchemyLogStore,
    new_session_id,
)

logger = structlog.get_logger(__name__)


class Rageshake:
    """Captures diagnostic output, persists it and submits bug reports."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        surface: Any = None,
        levels: Optional[Mapping[str, str]] = None,
        store: Optional[LogStoreInterface] = None,
        gateway: Optional[BugReportGateway] = None,
        platform: Optional[AppPlatform] = None,
    ):
        """
        Wire up the capture components. Nothing is patched or opened until
        ``init()``.

        Args:
            settings: Service settings (global settings if None)
            surface: Object whose severity functions are captured, if any
            levels: Function name to level code mapping for ``surface``
            store: Log store (SQLite store for a new session if None)
            gateway: Report delivery gateway
            platform: Source of version and user agent
        """
        self.settings = settings or get_global_settings()
        self.store = store or SQLAlchemyLogStore(
            new_session_id(), self.settings.database_url
        )
        self.session_id = self.store.session_id

        self.buffer = LineBuffer()
        self.patcher = ConsolePatcher(self.buffer, levels)
        self.surface = surface
        self.capture: Optional[ConsoleCapture] = None

        self.retention = RetentionManager(self.store)
        self.assembler = ReportAssembler(self.store, self.buffer, self.retention)
        self.gateway = gateway or BugReportGateway(
            self.settings.request_timeout_seconds
        )
        self.reports = ReportService(
            assembler=self.assembler,
            retention=self.retention,
            gateway=self.gateway,
            platform=platform or DefaultPlatform(self.settings.app_version),
            max_log_size_bytes=self.settings.max_log_size_bytes,
        )
        self.reports.set_endpoint(self.settings.bug_report_endpoint)

        self.scheduler = FlushScheduler(
            self.flush, self.settings.flush_interval_seconds
        )
        self._init_task: Optional["asyncio.Task[None]"] = None

    def init(self) -> "asyncio.Task[None]":
        """
        Start capturing. Safe to call repeatedly: every call returns the same
        task and nothing is patched or opened twice.

        Capture starts immediately; the returned task completes once the
        store is open (or found unavailable) and startup cleanup has run. It
        never fails because of the store.

        :raises RuntimeError: If called outside a running event loop
        """
        if self._init_task is not None:
            return self._init_task

        # Raises before anything is patched when called outside the event loop
        loop = asyncio.get_running_loop()

        if self.surface is not None:
            self.capture = self.patcher.patch(self.surface)
        self.reports.initialized = True

        self._init_task = loop.create_task(self._initialize())
        return self._init_task

    async def _initialize(self) -> None:
        try:
            await self.store.open()
        except StoreUnavailableError as e:
            logger.warning(
                "Log store unavailable, keeping logs in memory only",
                error=str(e),
            )
            return

        self.scheduler.start()

        if self.settings.cleanup_on_init:
            await self.cleanup()

    def capture_logging(
        self, target: Optional[logging.Logger] = None, level: int = logging.DEBUG
    ) -> LineBufferHandler:
        """Capture records of a stdlib logger (root logger by default)."""
        handler = LineBufferHandler(self.buffer, level)
        (target or logging.getLogger()).addHandler(handler)
        return handler

    def structlog_processor(self) -> LineBufferProcessor:
        """Processor capturing structlog events, see ``setup_logging``."""
        return LineBufferProcessor(self.buffer)

    async def flush(self) -> None:
        """Move buffered lines into a new chunk of the current session."""
        if not self.store.available:
            # Memory-only: the buffer is the only copy
            return
        lines = self.buffer.drain()
        if not lines:
            return
        try:
            await self.store.append(self.session_id, lines)
        except StoreError as e:
            logger.error("Failed to flush logs", error=str(e))

    async def cleanup(self) -> List[str]:
        """Prune old sessions without touching the current one."""
        try:
            return await self.retention.prune(self.settings.max_log_size_bytes, False)
        except StoreError as e:
            logger.error("Failed to clean up old logs", error=str(e))
            return []

    def set_endpoint(self, url: Optional[str]) -> None:
        """Set the URL bug reports are POSTed to."""
        self.reports.set_endpoint(url)

    async def send_report(self, user_text: Optional[str] = None) -> BugReport:
        """Send a bug report. See ``ReportService.send_report``."""
        return await self.reports.send_report(user_text)

    async def shutdown(self) -> None:
        """Stop the timer, flush what is left and release everything."""
        if self._init_task is not None and not self._init_task.done():
            await self._init_task
        self.scheduler.shutdown()
        await self.flush()
        if self.capture is not None:
            self.capture.restore()
        await self.store.close()
        await self.gateway.close()
