"""Logging configuration using structlog.

This module provides structured logging setup for rageshake and for host
applications that want their structlog output captured into bug reports.
"""

import logging
from typing import Any, Callable, List, Optional

import structlog


def setup_logging(
    log_level: str = "INFO", capture_processor: Optional[Callable[..., Any]] = None
) -> None:
    """
    Configure structlog for structured logging.

    :param log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :param capture_processor: Optional processor that sees every event before
        rendering, e.g. ``LineBufferProcessor(buffer)``
    """
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    processors: List[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if capture_processor is not None:
        # Capture after all context is added
        processors.append(capture_processor)

    processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

