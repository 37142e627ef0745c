"""
Error Taxonomy

Mutations on links report expected failures as values rather than raising:
the dashboard needs to tell "code taken" apart from "storage down" and render
a specific message, and neither is exceptional.

- ErrorKind: the closed set of failure categories
- Failure: a failure value returned in place of the successful result
- DatabaseError: raised for storage failures where a value cannot be returned
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure categories surfaced by the link registry."""
    INVALID_URL = "invalid_url"
    INVALID_CODE = "invalid_code"
    CODE_TAKEN = "code_taken"
    NOT_FOUND = "not_found"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class Failure:
    """A typed failure returned by a registry operation."""
    kind: ErrorKind
    message: str

    def __bool__(self) -> bool:
        return False


class ShortLinkException(Exception):
    """Base exception for the short-link service."""
    pass


class DatabaseError(ShortLinkException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
