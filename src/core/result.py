"""Result types for railway-oriented programming.

This module implements the Result pattern to handle operations that can fail
without using exceptions. Port contracts (notification providers, request
validators) return Results so the calling service decides whether a failure
becomes a lifecycle event, a raised exception, or both.

Usage:
    def check_length(title: str) -> Result[str, ValidationError]:
        if len(title) > 200:
            return Failure(error=ValidationError(...))
        return Success(value=title)

    match check_length(request.title):
        case Success(value=title):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
type Result[T, E] = Success[T] | Failure[E]
