"""Core infrastructure module.

This module exports core utilities used across features.
Never imports from features - only from external libraries.
"""

from .config import Settings, get_settings, get_global_settings
from .database import DatabaseManager
from .decorators import store_operation
from .exceptions import (
    RageshakeError,
    StoreError,
    StoreUnavailableError,
    StoreOperationError,
    SubmissionError,
    NotInitializedError,
    NoEndpointConfiguredError,
    DeliveryFailedError,
)
from .logging import setup_logging

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "get_global_settings",
    # Database
    "DatabaseManager",
    # Decorators
    "store_operation",
    # Exceptions
    "RageshakeError",
    "StoreError",
    "StoreUnavailableError",
    "StoreOperationError",
    "SubmissionError",
    "NotInitializedError",
    "NoEndpointConfiguredError",
    "DeliveryFailedError",
    # Logging
    "setup_logging",
]
