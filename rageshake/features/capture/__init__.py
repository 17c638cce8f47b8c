"""Capture feature: buffer console-level output until it is flushed."""

from .buffer import LineBuffer
from .handlers import LineBufferHandler, LineBufferProcessor
from .patcher import (
    CONSOLE_LEVELS,
    LOGGER_LEVELS,
    ConsoleCapture,
    ConsolePatcher,
    format_line,
    iso_timestamp,
)

__all__ = [
    "LineBuffer",
    "LineBufferHandler",
    "LineBufferProcessor",
    "CONSOLE_LEVELS",
    "LOGGER_LEVELS",
    "ConsoleCapture",
    "ConsolePatcher",
    "format_line",
    "iso_timestamp",
]
