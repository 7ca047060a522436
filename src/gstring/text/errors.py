"""Exception hierarchy for grapheme-indexed strings."""

from __future__ import annotations

from typing import Optional


class GStringError(Exception):
    """Base class for errors raised by ``gstring``.

    ``index`` and ``length`` describe the offending position when one exists,
    so callers can report it without parsing the message.
    """

    def __init__(
        self,
        message: str,
        *,
        index: Optional[int] = None,
        length: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.length = length


class OutOfRangeError(GStringError, IndexError):
    """Raised when a grapheme index, range bound, or byte offset is out of bounds."""


class InvalidRangeError(GStringError, ValueError):
    """Raised when a range has ``start > end`` or a step other than 1."""


class MalformedTextError(GStringError, ValueError):
    """Raised when input cannot be represented as valid UTF-8."""


class StaleViewError(GStringError, RuntimeError):
    """Raised when a view is read after its source string was mutated."""


__all__ = [
    "GStringError",
    "OutOfRangeError",
    "InvalidRangeError",
    "MalformedTextError",
    "StaleViewError",
]
