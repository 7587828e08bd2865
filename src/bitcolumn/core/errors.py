"""
Structured error types for bitcolumn.

Every failure raised while declaring a bit-field column, resolving a flag
name or rewriting a bulk update is a ``BitColumnError`` subclass carrying a
category and a small structured context (entity, column, flag) so callers can
log it without parsing the message.

Manifesto:
    - **Typed Error Hierarchy:** Declaration errors and value errors are distinct
    - **Fail at the boundary:** Raised synchronously where the name is resolved
    - **Rich Context:** Errors carry entity/column/flag metadata for logging
    - **Non-fatal collisions:** Accessor collisions are warnings, never errors

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     BitColumnError                        │
        │            (category, context, cause)                     │
        ├──────────────────────────────────────────────────────────┤
        │                                                           │
        │  InvalidBitFieldSpecError    UnknownFlagError             │
        │  (SCHEMA)                    (VALIDATION)                 │
        │       │                                                   │
        │  BitWidthExceededError       InvalidFlagValueError        │
        │                              (VALIDATION)                 │
        │                                                           │
        │  AccessorCollisionWarning (UserWarning, not raised)       │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = UnknownFlagError("deleted", column="status")
    >>> error.flag
    'deleted'
    >>> error.to_dict()["category"]
    'VALIDATION'

Tags:
    error-handling, exception-hierarchy, error-context, bitcolumn

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    SCHEMA = "SCHEMA"             # Invalid column declaration
    VALIDATION = "VALIDATION"     # Unresolvable flag, bad value
    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized errors


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a bit-field error.

    Attributes:
        entity: Name of the mapped class
        column: Bit-field column name
        flag: Flag (or accessor) name involved
        metadata: Additional key-value pairs
    """

    entity: str | None = None
    column: str | None = None
    flag: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["entity", "column", "flag"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class BitColumnError(Exception):
    """
    Base exception for all bitcolumn errors.

    Subclasses set ``default_category``; instances carry an
    :class:`ErrorContext` and an optional chained ``cause``.

    Examples:
        >>> error = BitColumnError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(column="status").context.column
        'status'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> BitColumnError:
        """
        Add context to this error (fluent API).

        Usage:
            raise UnknownFlagError("foo").with_context(entity="Item")
        """
        for key, value in kwargs.items():
            if value is None:
                continue
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# DECLARATION ERRORS
# =============================================================================


class InvalidBitFieldSpecError(BitColumnError):
    """A bit-field column declaration is malformed (empty or duplicate flags, conflicting re-registration)."""

    default_category = ErrorCategory.SCHEMA


class BitWidthExceededError(InvalidBitFieldSpecError):
    """More flags were declared than the storage integer can represent."""

    def __init__(self, column: str, flag_count: int, limit: int, **kwargs: Any):
        super().__init__(
            f"bitfield '{column}' declares {flag_count} flags but its storage holds at most {limit}",
            **kwargs,
        )
        self.flag_count = flag_count
        self.limit = limit
        self.with_context(column=column, flag_count=flag_count, limit=limit)


# =============================================================================
# VALUE ERRORS
# =============================================================================


class UnknownFlagError(BitColumnError):
    """A symbolic value names a flag the target column does not declare."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, flag: Any, *, column: str | None = None, **kwargs: Any):
        where = f" on bitfield '{column}'" if column else ""
        super().__init__(f"bitfield item '{flag}' does not exist{where}", **kwargs)
        self.flag = flag
        self.with_context(column=column, flag=str(flag))


class InvalidFlagValueError(BitColumnError):
    """A value written to a bit-field column is neither an integer nor symbolic."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, value: Any, *, column: str | None = None, **kwargs: Any):
        super().__init__(
            f"cannot store {value!r} in bitfield '{column}': expected a non-negative "
            "integer, a flag name or a collection of flag names",
            **kwargs,
        )
        self.value = value
        self.with_context(column=column)


# =============================================================================
# WARNINGS
# =============================================================================


class AccessorCollisionWarning(UserWarning):
    """A flag accessor could not be installed because the name is already taken."""


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, BitColumnError):
        return error.category
    if isinstance(error, (ValueError, TypeError, KeyError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "BitColumnError",
    "InvalidBitFieldSpecError",
    "BitWidthExceededError",
    "UnknownFlagError",
    "InvalidFlagValueError",
    "AccessorCollisionWarning",
    "categorize_error",
]
