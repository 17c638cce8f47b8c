"""Diagnostic log capture, retention and bug report submission."""

from rageshake.core.exceptions import (
    DeliveryFailedError,
    NoEndpointConfiguredError,
    NotInitializedError,
    RageshakeError,
    StoreOperationError,
    StoreUnavailableError,
    SubmissionError,
)
from rageshake.features.rageshake import Rageshake

__all__ = [
    "Rageshake",
    "RageshakeError",
    "StoreUnavailableError",
    "StoreOperationError",
    "SubmissionError",
    "NotInitializedError",
    "NoEndpointConfiguredError",
    "DeliveryFailedError",
]
