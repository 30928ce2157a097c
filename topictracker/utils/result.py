"""
Result type for store operations.

Every store operation returns either Success(value) or Failure(error)
instead of raising.

Example:
    result = tracker.add_language("Go")
    if result.is_success:
        print(result.unwrap().id)
    else:
        print(result.unwrap_error().message)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful result containing a value."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_error(self) -> None:
        """Raises ValueError - Success has no error."""
        raise ValueError("Cannot get error from Success result")


@dataclass(frozen=True)
class Failure(Generic[E]):
    """A failed result containing an error."""

    error: E

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> None:
        """Raises ValueError - Failure has no value."""
        raise ValueError(f"Cannot get value from Failure result: {self.error}")

    def unwrap_error(self) -> E:
        return self.error


Result = Union[Success[T], Failure[E]]
