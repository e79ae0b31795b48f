"""Failure handling shared by the query functions.

Each query function takes an `on_error` policy:
- FALLBACK: log the failure and return a type-appropriate default
- RAISE: log the failure and raise DataAccessError (SearchError for result search)

Most functions default to FALLBACK; result search defaults to RAISE so the UI
can show its message.
"""

from enum import Enum
import logging
from typing import NoReturn, TypeVar

from reciters_api.stores.supabase import describe_error

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")

# "An error occurred while searching. Please try again."
SEARCH_FAILED_MESSAGE = "حدث خطأ أثناء البحث. يرجى المحاولة مرة أخرى."


class ErrorPolicy(str, Enum):
    """What a query function does when its request fails."""

    FALLBACK = "fallback"
    RAISE = "raise"


class DataAccessError(RuntimeError):
    """A query against the database gateway failed."""

    code = "DATA_ACCESS_FAILED"

    def __init__(self, message: str, *, operation: str):
        super().__init__(message)
        self.operation = operation


class SearchError(DataAccessError):
    """Result search failed; the message is meant for end users."""

    code = "SEARCH_FAILED"

    def __init__(self, message: str = SEARCH_FAILED_MESSAGE, *, operation: str = "searching results"):
        super().__init__(message, operation=operation)


def _raise(operation: str, cause: Exception, error_cls: type[DataAccessError]) -> NoReturn:
    if error_cls is SearchError:
        raise SearchError(operation=operation) from cause
    raise error_cls(f"Error {operation}: {describe_error(cause)}", operation=operation) from cause


def handle_failure(
    operation: str,
    cause: Exception,
    *,
    on_error: ErrorPolicy,
    default: T,
    error_cls: type[DataAccessError] = DataAccessError,
) -> T:
    """Log a failed query and apply the call's error policy.

    Args:
        operation: Human-readable name, e.g. "searching reciters".
        cause: The underlying failure (APIError, httpx.HTTPError, ValidationError, ...).
        on_error: FALLBACK returns `default`, RAISE raises `error_cls`.
        default: Value returned under FALLBACK.
        error_cls: Exception type raised under RAISE.

    Returns:
        `default` under FALLBACK.
    """
    logger.error(f"Error {operation}: {describe_error(cause)}")
    if on_error == ErrorPolicy.RAISE:
        _raise(operation, cause, error_cls)
    return default
