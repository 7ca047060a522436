"""Validation helpers shared by every public string operation."""

from __future__ import annotations

from typing import Tuple, Union

from .errors import InvalidRangeError, OutOfRangeError

RangeLike = Union[slice, range, Tuple[int, int]]


def _require_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an int, not {type(value).__name__}")
    return value


def ensure_index(index: int, length: int) -> int:
    """Return ``index`` if it addresses an existing grapheme."""

    index = _require_int(index, "index")
    if index < 0 or index >= length:
        raise OutOfRangeError(
            f"Grapheme index {index} out of range for length {length}",
            index=index,
            length=length,
        )
    return index


def ensure_insert_index(index: int, length: int) -> int:
    """Return ``index`` if it is a valid insertion point (``0..=length``)."""

    index = _require_int(index, "index")
    if index < 0 or index > length:
        raise OutOfRangeError(
            f"Grapheme position {index} out of range for length {length}",
            index=index,
            length=length,
        )
    return index


def ensure_offset(offset: int, size: int) -> int:
    offset = _require_int(offset, "byte offset")
    if offset < 0 or offset > size:
        raise OutOfRangeError(
            f"Byte offset {offset} out of range for {size} bytes",
            index=offset,
            length=size,
        )
    return offset


def ensure_range(bounds: RangeLike, length: int) -> Tuple[int, int]:
    """Normalize ``bounds`` into a validated ``(start, end)`` pair.

    Accepts a ``slice`` (open ends allowed), a ``range`` or a 2-tuple.
    """

    if isinstance(bounds, slice):
        if bounds.step not in (None, 1):
            raise InvalidRangeError(f"Range step must be 1, got {bounds.step}")
        start = 0 if bounds.start is None else bounds.start
        end = length if bounds.stop is None else bounds.stop
    elif isinstance(bounds, range):
        if bounds.step != 1:
            raise InvalidRangeError(f"Range step must be 1, got {bounds.step}")
        start, end = bounds.start, bounds.stop
    else:
        start, end = bounds

    start = ensure_insert_index(start, length)
    end = ensure_insert_index(end, length)
    if start > end:
        raise InvalidRangeError(
            f"Range start {start} is greater than end {end}",
            index=start,
            length=length,
        )
    return start, end


__all__ = [
    "RangeLike",
    "ensure_index",
    "ensure_insert_index",
    "ensure_offset",
    "ensure_range",
]
