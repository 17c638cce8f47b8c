"""Forward stdlib logging and structlog output into a LineBuffer."""

import logging
from typing import Any, Dict

from .buffer import LineBuffer
from .patcher import format_line

# Level names (stdlib and structlog) to the one-letter codes used in captured lines
LEVEL_CODES: Dict[str, str] = {
    "DEBUG": "D",
    "INFO": "I",
    "WARN": "W",
    "WARNING": "W",
    "ERROR": "E",
    "CRITICAL": "E",
    "EXCEPTION": "E",
    "FATAL": "E",
}


class LineBufferHandler(logging.Handler):
    """Logging handler that records every log record as a captured line.

    Attach it to the root logger to capture output of libraries that log
    through the standard ``logging`` module.
    """

    def __init__(self, buffer: LineBuffer, level=logging.DEBUG):
        """Initialize the handler.

        Args:
            buffer: LineBuffer receiving formatted lines.
            level: Minimum logging level to capture (default: DEBUG).
        """
        super().__init__(level)
        self.buffer = buffer

    def emit(self, record: logging.LogRecord) -> None:
        """Record a log record.

        Args:
            record: LogRecord to capture.
        """
        try:
            code = LEVEL_CODES.get(record.levelname, "I")
            message = record.getMessage()
            if record.exc_info:
                if not record.exc_text:
                    record.exc_text = logging.Formatter().formatException(
                        record.exc_info
                    )
                message = f"{message}\n{record.exc_text}"
            self.buffer.record(format_line(code, record.name, message))
        except Exception:
            # Silently ignore errors so logging never breaks the host
            pass


class LineBufferProcessor:
    """Structlog processor that records events into a LineBuffer.

    Returns the event dict unchanged so the rest of the chain still renders
    and emits it.
    """

    def __init__(self, buffer: LineBuffer):
        """Initialize the processor.

        Args:
            buffer: LineBuffer receiving formatted lines.
        """
        self.buffer = buffer

    def __call__(self, logger: Any, method_name: str, event_dict: Dict[str, Any]):
        """Process a structlog event.

        Args:
            logger: Logger instance.
            method_name: Log method name.
            event_dict: Event dictionary.

        Returns:
            Event dictionary (unchanged).
        """
        try:
            # add_log_level has already mapped exception/fatal/warn to a level
            level = str(event_dict.get("level", method_name)).upper()
            code = LEVEL_CODES.get(level, "I")
            context = " ".join(
                f"{key}={value}"
                for key, value in event_dict.items()
                if key not in ("event", "timestamp", "level")
            )
            args = [event_dict.get("event", "")]
            if context:
                args.append(context)
            self.buffer.record(format_line(code, *args))
        except Exception:
            pass

        return event_dict
