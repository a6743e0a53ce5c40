"""Result monad for explicit error handling in domain operations.

Operations that can fail for expected reasons (an AI response with no
outline in it, a folder name that is blank, a scope that vanished while a
generation request was in flight) return a Result instead of raising.

Example usage:
    >>> def parse_title(raw: str) -> Result[str, str]:
    ...     if not raw.strip():
    ...         return Err("Title cannot be empty")
    ...     return Ok(raw.strip())
    ...
    >>> result = parse_title("  Plan  ")
    >>> if isinstance(result, Ok):
    ...     print(result.value)
    Plan
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value.

    Attributes:
        value: The success value of type T.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error.

    Attributes:
        error: The error value of type E.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007

