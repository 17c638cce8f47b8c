"""Reports feature: assemble captured history and submit bug reports."""

from .assembler import ReportAssembler
from .gateway import BugReportGateway
from .platform import AppPlatform, DefaultPlatform
from .schemas import DEFAULT_USER_TEXT, UNKNOWN, BugReport, ReportLog
from .service import ReportService

__all__ = [
    "ReportAssembler",
    "BugReportGateway",
    "AppPlatform",
    "DefaultPlatform",
    "DEFAULT_USER_TEXT",
    "UNKNOWN",
    "BugReport",
    "ReportLog",
    "ReportService",
]
