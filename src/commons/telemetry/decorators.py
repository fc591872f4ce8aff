"""Telemetry decorators for timing and exception logging."""

import functools
import inspect
import logging
import time
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar, overload

from src.commons.telemetry.logger import get_log_context, get_logger, log_context_var

P = ParamSpec("P")
R = TypeVar("R")


@overload
def timed(
    func: Callable[P, R],
) -> Callable[P, R]: ...


@overload
def timed(
    *,
    logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
    threshold_ms: float | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]: ...


def timed(
    func: Callable[P, R] | None = None,
    *,
    logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
    threshold_ms: float | None = None,
) -> Callable[P, R] | Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator to measure and log execution time.

    Can be used with or without arguments:
        @timed
        async def upload(): ...

        @timed(threshold_ms=500)
        async def upload(): ...

    Args:
        func: The function to decorate (when used without parentheses).
        logger: Optional logger instance. Defaults to the function's module logger.
        level: Log level for timing messages.
        threshold_ms: Only log if execution exceeds this threshold in milliseconds.

    Returns:
        Decorated function.
    """

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        log = logger or get_logger(fn.__module__)

        def _report(start: float) -> None:
            elapsed_ms = (time.perf_counter() - start) * 1000
            if threshold_ms is None or elapsed_ms >= threshold_ms:
                log.log(
                    level,
                    f"{fn.__qualname__} completed",
                    extra={"duration_ms": round(elapsed_ms, 2)},
                )

        @functools.wraps(fn)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                _report(start)

        @functools.wraps(fn)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            try:
                result = await fn(*args, **kwargs)  # type: ignore[misc]
                return result  # type: ignore[no-any-return]
            finally:
                _report(start)

        if inspect.iscoroutinefunction(fn):
            return async_wrapper  # type: ignore[return-value]
        return sync_wrapper

    if func is not None:
        return decorator(func)
    return decorator


def log_exceptions(
    *,
    logger: logging.Logger | None = None,
    level: int = logging.WARNING,
    message: str | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Decorator to log an exception with context and re-raise it.

    Args:
        logger: Optional logger instance.
        level: Log level for exceptions.
        message: Optional custom message. Defaults to "Exception in <qualname>".

    Returns:
        Decorator for async or sync callables.
    """

    def decorator(fn: Callable[P, R]) -> Callable[P, R]:
        log = logger or get_logger(fn.__module__)
        msg = message or f"Exception in {fn.__qualname__}"

        def _log(exc: Exception) -> None:
            log.log(
                level,
                msg,
                exc_info=level >= logging.ERROR,
                extra={
                    "exception_type": type(exc).__name__,
                    "error": str(exc),
                },
            )

        @functools.wraps(fn)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                _log(e)
                raise

        @functools.wraps(fn)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                result = await fn(*args, **kwargs)  # type: ignore[misc]
                return result  # type: ignore[no-any-return]
            except Exception as e:
                _log(e)
                raise

        if inspect.iscoroutinefunction(fn):
            return async_wrapper  # type: ignore[return-value]
        return sync_wrapper

    return decorator


class LogContext:
    """Context manager for adding temporary logging context."""

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs
        self._previous_context: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._previous_context = get_log_context()
        log_context_var.set({**self._previous_context, **self.context})
        return self

    def __exit__(self, *args: Any) -> None:
        log_context_var.set(self._previous_context)
