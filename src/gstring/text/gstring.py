"""Grapheme-indexed mutable string."""

from __future__ import annotations

import builtins
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from gstring.runtime import telemetry

from . import lines as _lines
from . import search as _search
from .grapheme import Grapheme
from .segmenter import RawText, normalize
from .shape import Shape, render_shape
from .validation import (
    RangeLike,
    ensure_index,
    ensure_insert_index,
    ensure_offset,
    ensure_range,
)
from .views import (
    BytesView,
    CharsView,
    GraphemesView,
    GStringView,
    LinesView,
    NewlinesView,
)

TextLike = Union[RawText, Grapheme, "GString", GStringView]


def _coerce(value: TextLike) -> Tuple[str, builtins.bytes]:
    if isinstance(value, GString):
        return value.to_str(), value._data
    if isinstance(value, GStringView):
        data = value.bytes()
        return data.decode("utf-8"), data
    if isinstance(value, Grapheme):
        return value.data, value.bytes()
    return normalize(value)


class GString:
    """Mutable UTF-8 string addressed by extended grapheme cluster.

    The byte buffer is kept next to its ``Shape`` (the byte length of every
    cluster). Every edit swaps in a new ``(bytes, shape)`` pair in one step and
    bumps ``version``, which invalidates outstanding views.

    >>> s = GString("a\\u0310e\\u0301o\\u0308\\u0332")
    >>> len(s)
    3
    >>> s.get(0) == "a\\u0310"
    True
    """

    __slots__ = ("_data", "_shape", "_version")

    def __init__(self, text: TextLike = "") -> None:
        if isinstance(text, GString):
            data, shape = text._data, text._shape
        else:
            decoded, data = _coerce(text)
            shape = Shape.from_text(decoded)
        self._data: builtins.bytes = data
        self._shape: Shape = shape
        self._version = 0

    @classmethod
    def new(cls) -> "GString":
        return cls()

    @classmethod
    def from_str(cls, text: str) -> "GString":
        return cls(text)

    @classmethod
    def from_bytes(cls, raw: Union[builtins.bytes, bytearray, memoryview]) -> "GString":
        """Build from raw UTF-8; invalid input raises ``MalformedTextError``."""

        return cls(builtins.bytes(raw))

    @classmethod
    def _from_parts(cls, data: builtins.bytes, shape: Shape) -> "GString":
        instance = cls.__new__(cls)
        instance._data = data
        instance._shape = shape
        instance._version = 0
        return instance

    # ------------------------------------------------------------------
    # Introspection

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return len(self._shape)

    def len(self) -> int:
        return len(self._shape)

    def is_empty(self) -> bool:
        return not self._shape

    def __bool__(self) -> bool:
        return bool(self._shape)

    def _grapheme(self, index: int) -> Grapheme:
        begin, end = self._shape.span(index)
        return Grapheme(self._data[begin:end].decode("utf-8"))

    def graphemes(self) -> Tuple[Grapheme, ...]:
        return tuple(self._grapheme(index) for index in range(len(self)))

    def into_graphemes(self) -> List[Grapheme]:
        return list(self.graphemes())

    def chars(self) -> List[str]:
        return list(self.to_str())

    def bytes(self) -> builtins.bytes:
        return self._data

    def to_str(self) -> str:
        return self._data.decode("utf-8")

    def shape(self) -> Tuple[int, ...]:
        return self._shape.lengths

    def shape_string(self) -> str:
        return render_shape(self._data, self._shape)

    def get(self, index: int) -> Optional[Grapheme]:
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self):
            return self._grapheme(index)
        return None

    def __getitem__(self, index: Union[int, slice]) -> Union[Grapheme, "GString"]:
        if isinstance(index, slice):
            return self.slice(index).to_gstring()
        return self._grapheme(ensure_index(index, len(self)))

    def __iter__(self) -> Iterator[Grapheme]:
        return iter(self.iter())

    def iter(self) -> GraphemesView:
        return GraphemesView(self)

    def iter_chars(self) -> CharsView:
        return CharsView(self)

    def iter_bytes(self) -> BytesView:
        return BytesView(self)

    def copy(self) -> "GString":
        return GString._from_parts(self._data, self._shape)

    def gstring(self) -> "GString":
        return self.copy()

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data form: the clusters and their byte lengths."""

        return {
            "data": [grapheme.to_dict() for grapheme in self.graphemes()],
            "shape": list(self._shape.lengths),
        }

    def __str__(self) -> str:
        return self.to_str()

    def __repr__(self) -> str:
        return f"GString({self.to_str()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GString):
            return self._data == other._data
        if isinstance(other, GStringView):
            return self._data == other.bytes()
        if isinstance(other, str):
            return self.to_str() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Mutation

    def insert(self, index: int, text: TextLike) -> None:
        """Insert ``text`` before grapheme ``index``; ``len()`` appends."""

        index = ensure_insert_index(index, len(self))
        self._replace(index, index, text, label="insert")

    def push(self, text: TextLike) -> None:
        self._replace(len(self), len(self), text, label="push")

    def remove(self, index: int) -> Grapheme:
        """Remove and return the grapheme at ``index``."""

        index = ensure_index(index, len(self))
        removed = self._replace(index, index + 1, "", label="remove")
        return removed._grapheme(0)

    def pop(self) -> Optional[Grapheme]:
        if not self._shape:
            return None
        last = len(self) - 1
        return self._replace(last, last + 1, "", label="pop")._grapheme(0)

    def slice(self, bounds: RangeLike) -> GStringView:
        start, end = ensure_range(bounds, len(self))
        return GStringView(self, start, end)

    def splice(self, bounds: RangeLike, replacement: TextLike) -> "GString":
        """Replace a grapheme range and return what was there before."""

        start, end = ensure_range(bounds, len(self))
        return self._replace(start, end, replacement, label="splice")

    def drain(self, bounds: RangeLike) -> "GString":
        start, end = ensure_range(bounds, len(self))
        return self._replace(start, end, "", label="drain")

    def clear(self) -> None:
        if self._shape:
            self._replace(0, len(self), "", label="clear")

    def _replace(self, start: int, end: int, replacement: TextLike, *, label: str) -> "GString":
        _, inserted = _coerce(replacement)
        with telemetry.span(
            f"gstring::{label}",
            component="gstring",
            metadata={"start": start, "end": end, "inserted_bytes": len(inserted)},
        ):
            begin, finish = self._shape.offsets[start], self._shape.offsets[end]
            removed = GString._from_parts(
                self._data[begin:finish], Shape(self._shape.lengths[start:end])
            )
            data = self._data[:begin] + inserted + self._data[finish:]
            shape = self._shape.resegment(data, start, end, len(inserted))
            self._data, self._shape = data, shape
            self._version += 1
        return removed

    # ------------------------------------------------------------------
    # Search

    def find(self, pattern: TextLike) -> Optional[int]:
        return self.find_from(0, pattern)

    def find_str(self, pattern: str) -> Optional[int]:
        return self.find_from(0, pattern)

    def find_from(self, n: int, pattern: TextLike) -> Optional[int]:
        """First grapheme-aligned match of ``pattern`` starting at or after ``n``."""

        n = ensure_insert_index(n, len(self))
        _, needle = _coerce(pattern)
        return _search.find_from(self._data, self._shape, n, needle)

    def find_from_str(self, n: int, pattern: str) -> Optional[int]:
        return self.find_from(n, pattern)

    find_str_from = find_from_str

    def find_prev_from(self, n: int, pattern: TextLike) -> Optional[int]:
        """Last grapheme-aligned match of ``pattern`` ending at or before ``n``."""

        n = ensure_insert_index(n, len(self))
        _, needle = _coerce(pattern)
        return _search.find_prev_from(self._data, self._shape, n, needle)

    def find_prev_from_str(self, n: int, pattern: str) -> Optional[int]:
        return self.find_prev_from(n, pattern)

    # ------------------------------------------------------------------
    # Positions and lines

    def position(self, byte_offset: int) -> int:
        """Index of the grapheme whose bytes contain ``byte_offset``."""

        byte_offset = ensure_offset(byte_offset, len(self._data))
        return self._shape.index_for_offset(byte_offset)

    def coordinates(self, index: int) -> _lines.Coordinates:
        """``(line, column)`` of grapheme ``index``, both 0-based."""

        index = ensure_insert_index(index, len(self))
        return _lines.coordinates(self._data, self._shape, index)

    def index_at(self, coordinates: _lines.Coordinates) -> int:
        return _lines.index_at(self._data, self._shape, coordinates)

    def lines(self, *, keepends: bool = False) -> LinesView:
        return LinesView(self, keepends=keepends)

    def newlines(self) -> NewlinesView:
        return NewlinesView(self)

    def line_shape(self) -> Tuple[int, ...]:
        return _lines.line_shape(self._data, self._shape)

    def layout_string(self) -> str:
        return _lines.layout_string(self._data, self._shape)


__all__ = ["GString", "TextLike"]
