"""Error handling utilities and decorators"""

import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar, cast

from ..exceptions import VocabEngineError

T = TypeVar("T")


def _log_failure(
    logger: logging.Logger, log_level: int, op_name: str, error: Exception
) -> None:
    if isinstance(error, VocabEngineError):
        logger.log(log_level, f"Engine error in {op_name}: {error.message}")
        if error.details:
            logger.debug(f"Error details for {op_name}: {error.details}")
    else:
        logger.log(log_level, f"Unexpected error in {op_name}: {error}", exc_info=True)


def _default(default_return: Any, default_factory: Callable[[], Any] | None) -> Any:
    return default_factory() if default_factory is not None else default_return


def handle_errors(
    default_return: Any = None,
    default_factory: Callable[[], Any] | None = None,
    log_level: int = logging.ERROR,
    reraise_on: type[Exception] | tuple[type[Exception], ...] | None = None,
    operation_name: str | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator for best-effort operations: log the failure and return a default.

    Args:
        default_return: Value to return when an error occurs
        default_factory: Builds a fresh default per failure (for mutable defaults)
        log_level: Logging level for error messages
        reraise_on: Exception type(s) to reraise instead of handling
        operation_name: Custom operation name for logging (defaults to function name)
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if reraise_on and isinstance(e, reraise_on):
                    raise
                _log_failure(
                    logging.getLogger(func.__module__),
                    log_level,
                    operation_name or func.__name__,
                    e,
                )
                return cast(T, _default(default_return, default_factory))

        return wrapper

    return decorator


def handle_errors_async(
    default_return: Any = None,
    default_factory: Callable[[], Any] | None = None,
    log_level: int = logging.ERROR,
    reraise_on: type[Exception] | tuple[type[Exception], ...] | None = None,
    operation_name: str | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Async version of the error handling decorator.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if reraise_on and isinstance(e, reraise_on):
                    raise
                _log_failure(
                    logging.getLogger(func.__module__),
                    log_level,
                    operation_name or func.__name__,
                    e,
                )
                return cast(T, _default(default_return, default_factory))

        return wrapper

    return decorator


class ErrorCollector:
    """Collects per-word failures during batch work"""

    def __init__(self) -> None:
        self.errors: list[tuple[str | None, Exception]] = []
        self.warnings: list[str] = []

    def add_error(self, error: Exception, word: str | None = None) -> None:
        self.errors.append((word, error))

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def get_summary(self) -> str:
        """Get a summary of all collected errors and warnings"""
        summary_parts = []

        if self.errors:
            summary_parts.append(f"{len(self.errors)} errors:")
            for i, (word, error) in enumerate(self.errors, 1):
                prefix = f"{word}: " if word else ""
                summary_parts.append(f"  {i}. {prefix}{error}")

        if self.warnings:
            summary_parts.append(f"{len(self.warnings)} warnings:")
            for i, warning in enumerate(self.warnings, 1):
                summary_parts.append(f"  {i}. {warning}")

        return "\n".join(summary_parts) if summary_parts else "No errors or warnings"

    def log_all(self, logger: logging.Logger) -> None:
        """Log all collected errors and warnings"""
        for word, error in self.errors:
            label = f" for '{word}'" if word else ""
            if isinstance(error, VocabEngineError):
                logger.error(f"Engine error{label}: {error.message}")
            else:
                logger.error(f"Unexpected error{label}: {error}")

        for warning in self.warnings:
            logger.warning(warning)

    def clear(self) -> None:
        self.errors.clear()
        self.warnings.clear()
