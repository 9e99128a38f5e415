"""
Structured error types for cronspine.

Every error raised by the parser or the engine is a ``CronError``. Errors
carry a category for routing, a small context dict for logging, and a
``to_dict()`` serializer so they can be passed straight into a structlog
event.

Manifesto:
    - **Typed hierarchy:** syntax, parse, range, lifecycle and config errors
      are distinct types, so callers catch exactly what they mean
    - **Fail at construction:** every schedule error surfaces before a timer
      is armed
    - **Never retried:** nothing in cronspine retries on error; the catch-up
      loop is a scheduling guarantee, not a retry mechanism

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────┐
        │                        CronError                          │
        │              (category, context, cause)                   │
        ├───────────────────────────────────────────────────────────┤
        │  CronSyntaxError   CronParseError    CronRangeError       │
        │  (PARSE)           (PARSE)           (VALIDATION)         │
        │                                                           │
        │  CronLifecycleError                  CronConfigError      │
        │  (ORCHESTRATION)                     (CONFIG)             │
        └───────────────────────────────────────────────────────────┘

Examples:
    >>> err = CronParseError("Could not parse cron value: x", item="x")
    >>> err.category
    <ErrorCategory.PARSE: 'PARSE'>
    >>> err.to_dict()["item"]
    'x'

Tags:
    error-handling, exception-hierarchy, cron, cronspine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for classification and log routing."""

    PARSE = "PARSE"                  # Schedule text could not be parsed
    VALIDATION = "VALIDATION"        # Value outside declared bounds
    CONFIG = "CONFIG"                # Timezone or settings problems
    ORCHESTRATION = "ORCHESTRATION"  # Engine lifecycle misuse
    INTERNAL = "INTERNAL"            # Bugs, unexpected state


class CronError(Exception):
    """
    Base exception for all cronspine errors.

    Subclasses set ``default_category``. Extra keyword arguments passed to
    the constructor land in ``context`` and show up in ``to_dict()``.

    Example:
        >>> raise CronError("boom").with_context(schedule="* * * * *")
        Traceback (most recent call last):
        ...
        cronspine.errors.CronError: boom
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        cause: Exception | None = None,
        **context: Any,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context)
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CronError:
        """Add context to this error (fluent API)."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SCHEDULE ERRORS (raised at construction time)
# =============================================================================


class CronSyntaxError(CronError, ValueError):
    """Schedule string does not contain exactly five fields."""

    default_category = ErrorCategory.PARSE

    def __init__(self, schedule: str, message: str | None = None):
        self.schedule = schedule
        super().__init__(
            message or "Cron schedule syntax must contain 5 settings split by the space character",
            schedule=schedule,
        )


class CronParseError(CronError, ValueError):
    """A field item matches none of the recognised grammars."""

    default_category = ErrorCategory.PARSE

    def __init__(self, message: str, *, item: str, **kwargs: Any):
        self.item = item
        super().__init__(message, item=item, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["item"] = self.item
        return result


class CronRangeError(CronError, ValueError):
    """A bare integer item falls outside its field's bounds."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, value: int, min_value: int, max_value: int):
        self.value = value
        self.min_value = min_value
        self.max_value = max_value
        super().__init__(
            f"Out of range cron value: {value} should be min: {min_value} and max: {max_value}",
            value=value,
            min_value=min_value,
            max_value=max_value,
        )


# =============================================================================
# ENGINE ERRORS
# =============================================================================


class CronLifecycleError(CronError):
    """Illegal engine state transition (start twice, cancel twice)."""

    default_category = ErrorCategory.ORCHESTRATION


class CronConfigError(CronError):
    """Invalid timezone or settings value."""

    default_category = ErrorCategory.CONFIG


def categorize_error(error: BaseException) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, CronError):
        return error.category
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "CronError",
    "CronSyntaxError",
    "CronParseError",
    "CronRangeError",
    "CronLifecycleError",
    "CronConfigError",
    "categorize_error",
]
