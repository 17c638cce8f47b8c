"""Public entry point: the long-lived capture context."""

from .scheduler import FlushScheduler
from .service import Rageshake

__all__ = ["FlushScheduler", "Rageshake"]
