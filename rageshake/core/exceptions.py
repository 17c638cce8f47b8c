"""
Custom exceptions for the log store and bug report submission.

Storage errors are logged where they happen and rarely leave their component;
submission errors are the only ones meant to reach the host application.
"""

from typing import Any, Dict, Optional


class RageshakeError(Exception):
    """Base exception for all rageshake errors."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.component = component
        self.operation = operation
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        if self.component and self.operation:
            return f"[{self.component}.{self.operation}] {self.message}"
        return self.message


class StoreError(RageshakeError):
    """Base exception for durable log store failures."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            component="LogStore",
            operation=operation,
            context=context,
            original_error=original_error,
        )


class StoreUnavailableError(StoreError):
    """The durable medium could not be opened - run memory-only."""

    pass


class StoreOperationError(StoreError):
    """A single append, read or delete against the store failed."""

    pass


class SubmissionError(RageshakeError):
    """Base exception for bug report submission failures."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            component="ReportService",
            operation="send_report",
            context=context,
            original_error=original_error,
        )


class NotInitializedError(SubmissionError):
    """A report was requested before capture was started with init()."""

    def __init__(self, message: str = "No console logger, did you forget to call init()?"):
        super().__init__(message)


class NoEndpointConfiguredError(SubmissionError):
    """No bug report endpoint has been set."""

    def __init__(self, message: str = "No bug report endpoint has been set."):
        super().__init__(message)


class DeliveryFailedError(SubmissionError):
    """The collector answered outside [200, 400) or the transport failed."""

    def __init__(
        self,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        if message is None:
            message = (
                f"HTTP {status_code}" if status_code is not None else "Transport error"
            )
        super().__init__(
            message,
            context={"status_code": status_code},
            original_error=original_error,
        )
        self.status_code: Optional[int] = status_code
