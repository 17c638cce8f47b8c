"""
Store layer decorators.

Wraps failures of the durable medium into ``StoreOperationError`` with
structured logging, so callers only ever have to handle rageshake errors.
"""

import functools
import inspect
from typing import Any, Awaitable, Callable, Dict, ParamSpec, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError

from rageshake.core.exceptions import StoreError, StoreOperationError

logger = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def store_operation(
    operation: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Decorator for log store methods.

    ``SQLAlchemyError`` and ``OSError`` raised by the wrapped coroutine are
    logged and re-raised as ``StoreOperationError``. Store errors raised
    directly by the method pass through unchanged.

    :param operation: Name of the operation for logs and error context
    :returns: Decorated coroutine function

    :example:
        @store_operation("append")
        async def append(self, session_id: str, text: str) -> None:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        sig = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except StoreError:
                raise
            except (SQLAlchemyError, OSError) as e:
                bound_args = sig.bind(*args, **kwargs)
                context: Dict[str, Any] = {
                    name: value
                    for name, value in bound_args.arguments.items()
                    if name == "session_id"
                }
                logger.error(
                    "Log store operation failed",
                    operation=operation,
                    error_type=type(e).__name__,
                    error=str(e),
                    **context,
                )
                raise StoreOperationError(
                    f"Failed to {operation} logs: {e}",
                    operation=operation,
                    context=context,
                    original_error=e,
                ) from e

        return wrapper

    return decorator
