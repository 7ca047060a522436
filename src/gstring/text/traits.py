"""One capability surface for owned and borrowed text.

``str``, ``bytes``, ``Grapheme``, ``GStringView`` and ``GString`` all go
through the same three entry points instead of each type growing its own copy
of the conversions.
"""

from __future__ import annotations

from typing import Iterator, List, Protocol, runtime_checkable

from .grapheme import Grapheme
from .gstring import GString, TextLike
from .lines import SupportsNewline, is_newline
from .segmenter import iter_clusters, normalize


@runtime_checkable
class SupportsGString(Protocol):
    """Values that can produce an owned ``GString`` copy of themselves."""

    def gstring(self) -> GString:
        ...


def gstring(value: TextLike) -> GString:
    """Return a new ``GString`` holding ``value``."""

    if isinstance(value, SupportsGString):
        return value.gstring()
    return GString(value)


def graphemes(value: TextLike) -> List[Grapheme]:
    return gstring(value).into_graphemes()


def graphemes_iter(value: TextLike) -> Iterator[str]:
    """Lazily yield the clusters of ``value`` as plain strings."""

    if isinstance(value, (str, bytes, bytearray, memoryview)):
        text, _ = normalize(value)
        return iter_clusters(text)
    return (str(grapheme) for grapheme in gstring(value))


__all__ = [
    "SupportsGString",
    "SupportsNewline",
    "gstring",
    "graphemes",
    "graphemes_iter",
    "is_newline",
]
