"""Error handling decorators for the polling cycle.

Provides a decorator that handles tracking error kinds consistently at the
per-account and per-match boundaries.

Error Handling Strategy:
- UnauthorizedError: always re-raised (fatal for the whole cycle)
- Errors listed in ``skip``: logged, the wrapped call returns None
- Anything else: re-raised to the next boundary
"""

from functools import wraps
from typing import Any, Awaitable, Callable, Optional, ParamSpec, Tuple, Type, TypeVar

import structlog

from .exceptions import TrackerError, UnauthorizedError

logger = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def handle_tracking_errors(
    *,
    operation: str,
    skip: Tuple[Type[BaseException], ...] = (TrackerError,),
    log_context: Optional[Callable[..., dict[str, Any]]] = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[Optional[R]]]]:
    """Decorator to skip a unit of work on selected errors.

    :param operation: Description of the operation (e.g., "sync account").
    :param skip: Exception types that skip the unit instead of propagating.
    :param log_context: Optional function extracting context from args for logging.
                        Example: lambda self, account: {"account_ref": account.account_ref}

    Usage example::

        @handle_tracking_errors(
            operation="process match",
            skip=(MalformedDataError, DataNotFoundError),
            log_context=lambda self, account, match_id: {"match_id": match_id},
        )
        async def _process_match(self, account, match_id):
            ...
    """

    def decorator(
        func: Callable[P, Awaitable[R]],
    ) -> Callable[P, Awaitable[Optional[R]]]:
        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Optional[R]:
            try:
                return await func(*args, **kwargs)
            except UnauthorizedError as error:
                logger.error(
                    f"Authorization failure during {operation} - cycle cannot continue",
                    error=str(error),
                    error_type=type(error).__name__,
                    **_extract_log_context(log_context, args, kwargs, func.__name__),
                )
                raise
            except skip as error:
                context = _extract_log_context(log_context, args, kwargs, func.__name__)
                if isinstance(error, TrackerError):
                    logger.warning(
                        f"Skipped {operation}",
                        error=str(error),
                        error_type=type(error).__name__,
                        **{**error.context, **context},
                    )
                else:
                    logger.error(
                        f"Failed to {operation}",
                        error=str(error),
                        error_type=type(error).__name__,
                        exc_info=True,
                        **context,
                    )
                return None

        return async_wrapper

    return decorator


def _extract_log_context(
    log_context: Optional[Callable], args: tuple, kwargs: dict, func_name: str
) -> dict:
    """Extract logging context from function arguments."""
    if not log_context:
        return {}

    try:
        return log_context(*args, **kwargs)
    except Exception as e:
        logger.warning(
            "Failed to extract log context",
            error=str(e),
            function=func_name,
        )
        return {}
