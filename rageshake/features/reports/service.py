"""Bug report submission: gather logs and metadata, POST once."""

import asyncio
from typing import List, Optional

import aiohttp
import structlog

from rageshake.core.exceptions import (
    DeliveryFailedError,
    NoEndpointConfiguredError,
    NotInitializedError,
    StoreError,
)
from rageshake.features.reports.assembler import ReportAssembler
from rageshake.features.reports.gateway import BugReportGateway
from rageshake.features.reports.platform import AppPlatform
from rageshake.features.reports.schemas import (
    DEFAULT_USER_TEXT,
    UNKNOWN,
    BugReport,
    ReportLog,
)
from rageshake.features.retention.service import RetentionManager

logger = structlog.get_logger(__name__)


class ReportService:
    """Builds a bug report from captured logs and delivers it once"""

    def __init__(
        self,
        assembler: ReportAssembler,
        retention: RetentionManager,
        gateway: BugReportGateway,
        platform: AppPlatform,
        max_log_size_bytes: int,
    ):
        self.assembler = assembler
        self.retention = retention
        self.gateway = gateway
        self.platform = platform
        self.max_log_size_bytes = max_log_size_bytes
        self.endpoint: Optional[str] = None
        self.initialized = False

    def set_endpoint(self, url: Optional[str]) -> None:
        self.endpoint = url

    async def send_report(self, user_text: Optional[str] = None) -> BugReport:
        """Send a bug report with the most recent logs.

        Persisted logs are cleared before delivery is attempted, so a failed
        delivery loses them locally. The caller decides whether to retry.

        :raises NotInitializedError: If capture was never started
        :raises NoEndpointConfiguredError: If no endpoint has been set
        :raises DeliveryFailedError: On a non-2xx/3xx status or transport error
        """
        if not self.initialized:
            raise NotInitializedError()
        if not self.endpoint:
            raise NoEndpointConfiguredError()

        version = await self._get_version()
        user_agent = self._get_user_agent()
        logs = await self._collect_logs()

        report = BugReport(
            logs=logs,
            text=user_text or DEFAULT_USER_TEXT,
            version=version,
            user_agent=user_agent,
        )

        try:
            status = await self.gateway.post_report(self.endpoint, report.model_dump())
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(
                "Failed to send bug report",
                endpoint=self.endpoint,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DeliveryFailedError(message=str(e), original_error=e) from e

        if status < 200 or status >= 400:
            logger.error(
                "Bug report rejected by collector",
                endpoint=self.endpoint,
                status=status,
            )
            raise DeliveryFailedError(status_code=status)

        logger.info("Bug report sent", sessions=len(logs))
        return report

    async def _get_version(self) -> str:
        try:
            return await self.platform.get_app_version()
        except Exception as e:
            logger.warning("Could not determine application version", error=str(e))
            return UNKNOWN

    def _get_user_agent(self) -> str:
        try:
            return self.platform.get_user_agent() or UNKNOWN
        except Exception:
            return UNKNOWN

    async def _collect_logs(self) -> List[ReportLog]:
        try:
            await self.retention.prune(self.max_log_size_bytes, False)
            return await self.assembler.assemble(clear_after=True)
        except StoreError as e:
            # Still worth sending what is in memory
            logger.error("Failed to read persisted logs for bug report", error=str(e))
            return [
                ReportLog(
                    id=self.assembler.store.session_id,
                    lines=self.assembler.buffer.drain(),
                )
            ]
