"""Read-only views over a ``GString``.

Views share the source's storage instead of copying it. Each one remembers the
source ``version`` it was created at and raises ``StaleViewError`` on any read
once the source has been mutated, including an iteration that is resumed after
an edit.
"""

from __future__ import annotations

import builtins
from typing import TYPE_CHECKING, Iterator, Optional, Tuple, Union

from .errors import StaleViewError
from .grapheme import Grapheme
from .lines import line_spans, newline_indices
from .shape import Shape
from .validation import ensure_index, ensure_range

if TYPE_CHECKING:
    from .gstring import GString


class SourceView:
    """Base class pinning a view to one version of its source."""

    __slots__ = ("_source", "_version")

    def __init__(self, source: "GString") -> None:
        self._source = source
        self._version = source.version

    @property
    def is_stale(self) -> bool:
        return self._source.version != self._version

    def _check(self) -> "GString":
        if self.is_stale:
            raise StaleViewError(
                f"{type(self).__name__} read after its source changed "
                f"(version {self._version} -> {self._source.version})"
            )
        return self._source


class GraphemesView(SourceView):
    """Restartable iterable of the source's graphemes."""

    __slots__ = ()

    def __len__(self) -> int:
        return len(self._check())

    def __iter__(self) -> Iterator[Grapheme]:
        source = self._check()
        for index in range(len(source)):
            yield self._check()._grapheme(index)


class CharsView(SourceView):
    """Restartable iterable of code points, ignoring cluster boundaries."""

    __slots__ = ()

    def __len__(self) -> int:
        return len(self._check().to_str())

    def __iter__(self) -> Iterator[str]:
        text = self._check().to_str()
        for char in text:
            self._check()
            yield char


class BytesView(SourceView):
    """Restartable iterable of the raw UTF-8 bytes as ints."""

    __slots__ = ()

    def __len__(self) -> int:
        return len(self._check().bytes())

    def __iter__(self) -> Iterator[int]:
        data = self._check().bytes()
        for value in data:
            self._check()
            yield value


class NewlinesView(SourceView):
    """Restartable iterable of the indices of newline graphemes, ascending."""

    __slots__ = ()

    def __iter__(self) -> Iterator[int]:
        source = self._check()
        for index in newline_indices(source.bytes(), source._shape):
            self._check()
            yield index


class LinesView(SourceView):
    """Restartable iterable of one ``GStringView`` per line.

    Terminators are left out unless ``keepends`` is set. A final terminator is
    followed by an empty last line.
    """

    __slots__ = ("_keepends",)

    def __init__(self, source: "GString", *, keepends: bool = False) -> None:
        super().__init__(source)
        self._keepends = keepends

    def __iter__(self) -> Iterator["GStringView"]:
        source = self._check()
        for start, end in line_spans(source.bytes(), source._shape, keepends=self._keepends):
            yield GStringView(self._check(), start, end)


class GStringView(SourceView):
    """Borrowed window ``[start, end)`` of grapheme indices into a ``GString``."""

    __slots__ = ("_start", "_end")

    def __init__(self, source: "GString", start: int, end: int) -> None:
        super().__init__(source)
        self._start = start
        self._end = end

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    def __len__(self) -> int:
        self._check()
        return self._end - self._start

    def len(self) -> int:
        return len(self)

    def is_empty(self) -> bool:
        return len(self) == 0

    def _byte_span(self) -> Tuple[int, int]:
        offsets = self._check()._shape.offsets
        return offsets[self._start], offsets[self._end]

    def bytes(self) -> builtins.bytes:
        begin, end = self._byte_span()
        return self._source.bytes()[begin:end]

    def to_str(self) -> str:
        return self.bytes().decode("utf-8")

    def shape(self) -> Tuple[int, ...]:
        return self._check().shape()[self._start : self._end]

    def get(self, index: int) -> Optional[Grapheme]:
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self):
            return self._source._grapheme(self._start + index)
        return None

    def __getitem__(self, index: Union[int, slice]) -> Union[Grapheme, "GStringView"]:
        if isinstance(index, slice):
            start, end = ensure_range(index, len(self))
            return GStringView(self._source, self._start + start, self._start + end)
        return self._source._grapheme(self._start + ensure_index(index, len(self)))

    def __iter__(self) -> Iterator[Grapheme]:
        for index in range(self._start, self._end):
            yield self._check()._grapheme(index)

    def to_gstring(self) -> "GString":
        """Copy the viewed graphemes into an independent ``GString``."""

        begin, end = self._byte_span()
        shape = self._source._shape
        return type(self._source)._from_parts(
            self._source.bytes()[begin:end],
            Shape(shape.lengths[self._start : self._end]),
        )

    def gstring(self) -> "GString":
        return self.to_gstring()

    def __str__(self) -> str:
        return self.to_str()

    def __repr__(self) -> str:
        state = "stale" if self.is_stale else repr(self.to_str())
        return f"GStringView({state}, start={self._start}, end={self._end})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GStringView):
            return self.bytes() == other.bytes()
        if isinstance(other, str):
            return self.to_str() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


__all__ = [
    "SourceView",
    "GraphemesView",
    "CharsView",
    "BytesView",
    "NewlinesView",
    "LinesView",
    "GStringView",
]
