"""Wrap the severity functions of a diagnostic surface so calls are recorded.

Wrapping is preferable to asking every library to use one logging framework:
whatever writes to the surface ends up in the buffer. The wrapper records the
line first and then calls the original function unchanged.

Example line::

    2017-01-18T11:23:53.214Z W Failed to set badge count
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from .buffer import LineBuffer

# Browser-console style surfaces
CONSOLE_LEVELS: Dict[str, str] = {
    "log": "I",
    "info": "I",
    "warn": "W",
    "error": "E",
}

# logging.Logger style surfaces
LOGGER_LEVELS: Dict[str, str] = {
    "debug": "D",
    "info": "I",
    "warning": "W",
    "error": "E",
    "critical": "E",
}


def iso_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601 timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def format_line(level: str, *args: Any) -> str:
    """Format one log line: ``<timestamp> <level> <args joined by spaces>\\n``."""
    return f"{iso_timestamp()} {level} {' '.join(str(arg) for arg in args)}\n"


class ConsoleCapture:
    """Handle for a patched surface; owns the original functions."""

    def __init__(self, surface: Any, originals: Dict[str, Callable[..., Any]]):
        self.surface = surface
        self.originals = originals
        self.active = True

    def restore(self) -> None:
        """Put the original severity functions back on the surface."""
        if not self.active:
            return
        for name, original in self.originals.items():
            setattr(self.surface, name, original)
        self.active = False


class ConsolePatcher:
    """Records every call to a surface's severity functions into a LineBuffer."""

    def __init__(
        self, buffer: LineBuffer, levels: Optional[Mapping[str, str]] = None
    ):
        self.buffer = buffer
        self.levels: Mapping[str, str] = levels or CONSOLE_LEVELS
        self._captures: Dict[int, ConsoleCapture] = {}

    def record(self, level: str, *args: Any) -> None:
        """Record a line; never raises."""
        try:
            self.buffer.record(format_line(level, *args))
        except Exception:
            # Diagnostics must never break the caller
            pass

    def patch(self, surface: Any) -> ConsoleCapture:
        """Wrap the severity functions present on ``surface``.

        Patching the same surface twice returns the existing capture.
        """
        existing = self._captures.get(id(surface))
        if existing is not None and existing.active:
            return existing

        originals: Dict[str, Callable[..., Any]] = {}
        for fn_name, level in self.levels.items():
            original = getattr(surface, fn_name, None)
            if not callable(original):
                continue
            originals[fn_name] = original
            setattr(surface, fn_name, self._wrap(level, original))

        capture = ConsoleCapture(surface, originals)
        self._captures[id(surface)] = capture
        return capture

    def _wrap(
        self, level: str, original: Callable[..., Any]
    ) -> Callable[..., Any]:
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            self.record(level, *args)
            return original(*args, **kwargs)

        wrapper.__wrapped__ = original  # type: ignore[attr-defined]
        return wrapper
