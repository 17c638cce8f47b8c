"""Version and environment information attached to bug reports."""

import platform
import sys
from importlib import metadata
from typing import Optional, Protocol

from rageshake.core.config import get_global_settings


class AppPlatform(Protocol):
    """Host application details needed for a report"""

    async def get_app_version(self) -> str:
        """Version of the host application"""
        ...

    def get_user_agent(self) -> str:
        """Description of the runtime the application runs in"""
        ...


class DefaultPlatform:
    """Platform backed by settings and the running interpreter."""

    def __init__(self, app_version: Optional[str] = None, distribution: str = "rageshake"):
        self.app_version = app_version
        self.distribution = distribution

    async def get_app_version(self) -> str:
        """Return the configured version, else the installed distribution's.

        :raises LookupError: If neither is available
        """
        version = self.app_version or get_global_settings().app_version
        if version:
            return version
        try:
            return metadata.version(self.distribution)
        except metadata.PackageNotFoundError as e:
            raise LookupError(f"Unknown application version: {e}") from e

    def get_user_agent(self) -> str:
        return (
            f"{platform.python_implementation()}/{platform.python_version()} "
            f"({platform.system()} {platform.release()}; {sys.platform})"
        )
