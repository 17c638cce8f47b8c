"""HTTP delivery of bug reports to the remote collector."""

import asyncio
from typing import Any, Dict, Optional

import aiohttp
import structlog

from rageshake.core.config import get_global_settings

logger = structlog.get_logger(__name__)


class BugReportGateway:
    """Gateway POSTing report bodies as JSON.

    Bug reports go over plain HTTPS rather than through the application's own
    backend, which may be the very thing that is broken.
    """

    def __init__(self, timeout_seconds: Optional[int] = None):
        settings = get_global_settings()
        self.timeout_seconds = timeout_seconds or settings.request_timeout_seconds
        self.session: Optional[aiohttp.ClientSession] = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the aiohttp session."""
        if self.session is None or self.session.closed:
            async with self._session_lock:
                if self.session is None or self.session.closed:
                    timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
                    self.session = aiohttp.ClientSession(
                        headers={"Content-Type": "application/json"},
                        timeout=timeout,
                    )

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def post_report(self, url: str, body: Dict[str, Any]) -> int:
        """POST a report once and return the HTTP status.

        :raises aiohttp.ClientError: On transport failure
        :raises asyncio.TimeoutError: If the collector does not answer in time
        """
        await self.start_session()
        async with self.session.post(url, json=body) as response:
            logger.info(
                "Bug report request completed",
                url=url,
                status=response.status,
                sessions=len(body.get("logs", [])),
            )
            return response.status
