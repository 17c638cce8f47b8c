"""Retention feature: keep persisted logs within a byte budget."""

from .service import RetentionManager

__all__ = ["RetentionManager"]
