"""Result types for railway-oriented programming.

Operations that can fail return a Result instead of raising, which keeps the
request pipeline explicit: every stage either hands a value to the next stage
or short-circuits with a typed error.

Usage:
    def split_ids(raw: str) -> Result[list[str], str]:
        ids = [part for part in raw.split(",") if part]
        if not ids:
            return Failure(error="No ids supplied")
        return Success(value=ids)

    match split_ids("a,b"):
        case Success(value=ids):
            ...
        case Failure(error=message):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: The produced value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: The error describing the failure.
    """

    error: E


# Type alias for Result union
type Result[T, E] = Success[T] | Failure[E]
