"""Grapheme-aligned substring search over a shaped buffer.

A byte-level hit only counts when both of its ends sit on cluster
boundaries of the haystack, e.g. ``"e"`` is not found inside ``"e\\u0301"``.
"""

from __future__ import annotations

from typing import Optional

from .shape import Shape


def find_from(data: bytes, shape: Shape, start: int, pattern: bytes) -> Optional[int]:
    """First aligned match beginning at grapheme ``start`` or later."""

    if not pattern:
        return start
    offset = shape.offsets[start]
    while True:
        hit = data.find(pattern, offset)
        if hit < 0:
            return None
        index = shape.boundary_index(hit)
        if index is not None and shape.is_boundary(hit + len(pattern)):
            return index
        offset = hit + 1


def find_prev_from(data: bytes, shape: Shape, end: int, pattern: bytes) -> Optional[int]:
    """Last aligned match that ends at grapheme ``end`` or earlier."""

    if not pattern:
        return end
    limit = shape.offsets[end]
    while True:
        hit = data.rfind(pattern, 0, limit)
        if hit < 0:
            return None
        index = shape.boundary_index(hit)
        if index is not None and shape.is_boundary(hit + len(pattern)):
            return index
        limit = hit + len(pattern) - 1


__all__ = ["find_from", "find_prev_from"]
