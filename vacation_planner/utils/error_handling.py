"""
Error handling utilities for the Vacation Planner client.

This module provides the error taxonomy surfaced to views through failed
resources, plus a decorator to convert unexpected exceptions at the edges
of the client into that taxonomy.
"""

import functools
import traceback
from collections.abc import Callable
from typing import Any, TypeVar, cast

from loguru import logger

# Type variables for function decorator typing
F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")


class VacationPlannerError(Exception):
    """Base exception class for all Vacation Planner errors."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        status_code: int | None = None,
    ):
        """
        Initialize a VacationPlannerError.

        Args:
            message: Human-readable error message shown to the user
            original_error: The original exception that caused this error (optional)
            status_code: HTTP status code reported by the service (optional)
        """
        self.message = message
        self.original_error = original_error
        self.status_code = status_code
        if original_error:
            message = f"{message} - Original error: {original_error!s}"
        super().__init__(message)


class ResourceNotFoundError(VacationPlannerError):
    """Error raised when the service reports no such entity."""

    pass


class ValidationError(VacationPlannerError):
    """Error raised when the service rejects malformed input."""

    pass


class NetworkError(VacationPlannerError):
    """Error raised on transport failure, when no response was received."""

    pass


class ServiceFailure(VacationPlannerError):
    """Error raised when a response arrived but reports a logical failure."""

    pass


class ResourceStateError(RuntimeError):
    """Raised when a resource is settled out of order."""

    pass


class WizardPreconditionError(RuntimeError):
    """Raised when the booking wizard is built without a loaded trip."""

    pass


def handle_errors(
    default_value: T | None = None, error_cls: type[Exception] = VacationPlannerError
) -> Callable[[F], F]:
    """
    Decorator to catch and handle exceptions, logging them and
    optionally returning a default value.

    Args:
        default_value: Value to return if an exception occurs (optional)
        error_cls: Exception type to re-raise (default: VacationPlannerError)

    Returns:
        Decorated function
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                func_name = func.__name__
                logger.error(f"Error in {func_name}: {e!s}")
                logger.debug(f"Traceback: {traceback.format_exc()}")

                if default_value is not None:
                    logger.info(f"Returning default value from {func_name}")
                    return default_value

                raise error_cls(str(e), original_error=e) from e

        return cast(F, wrapper)

    return decorator
