"""
Store error values.

Failures are returned inside a Result, never raised past an operation.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID = "invalid"  # empty or blank title


@dataclass(frozen=True)
class StoreError:
    """
    A caller-visible, recoverable failure.

    The message names the offending id/title and the attempted operation.
    """
    kind: ErrorKind
    message: str

    @classmethod
    def not_found(cls, message: str) -> "StoreError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def already_exists(cls, message: str) -> "StoreError":
        return cls(ErrorKind.ALREADY_EXISTS, message)

    @classmethod
    def invalid(cls, message: str) -> "StoreError":
        return cls(ErrorKind.INVALID, message)

    def __str__(self) -> str:
        return self.message
