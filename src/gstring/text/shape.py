"""Byte-length map of grapheme clusters and its incremental maintenance."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from itertools import accumulate
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union, overload

from gstring.runtime.telemetry import env_int, record_event

from .segmenter import cluster_lengths, decode, iter_clusters

# Clusters past the edit included in the first re-segmentation window.
RESEGMENT_CONTEXT = max(1, env_int("RESEGMENT_CONTEXT", 4))


class Shape(Sequence[int]):
    """Immutable sequence of per-cluster byte lengths.

    ``offsets`` is the prefix-sum table: ``offsets[i]`` is the first byte of
    cluster ``i`` and ``offsets[-1]`` is the total byte length.
    """

    __slots__ = ("_lengths", "_offsets")

    def __init__(self, lengths: Iterable[int] = ()) -> None:
        values = tuple(lengths)
        for value in values:
            if value <= 0:
                raise ValueError(f"cluster lengths must be positive, got {value}")
        self._lengths: Tuple[int, ...] = values
        self._offsets: Tuple[int, ...] = (0, *accumulate(values))

    @classmethod
    def from_text(cls, text: str) -> "Shape":
        return cls(cluster_lengths(text))

    @property
    def lengths(self) -> Tuple[int, ...]:
        return self._lengths

    @property
    def offsets(self) -> Tuple[int, ...]:
        return self._offsets

    @property
    def byte_length(self) -> int:
        return self._offsets[-1]

    def __len__(self) -> int:
        return len(self._lengths)

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[int, ...]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[int, Tuple[int, ...]]:
        return self._lengths[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._lengths)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Shape):
            return self._lengths == other._lengths
        if isinstance(other, (tuple, list)):
            return self._lengths == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._lengths)

    def __repr__(self) -> str:
        return f"Shape({list(self._lengths)!r})"

    def span(self, index: int) -> Tuple[int, int]:
        """Byte range ``(start, end)`` of cluster ``index``."""

        return self._offsets[index], self._offsets[index + 1]

    def index_for_offset(self, offset: int) -> int:
        """Index of the cluster containing byte ``offset``.

        The end offset maps to ``len(self)``.
        """

        if offset >= self.byte_length:
            return len(self._lengths)
        return bisect_right(self._offsets, offset) - 1

    def boundary_index(self, offset: int) -> Optional[int]:
        """Cluster index starting at ``offset``, or ``None`` mid-cluster."""

        position = bisect_left(self._offsets, offset)
        if position < len(self._offsets) and self._offsets[position] == offset:
            return position
        return None

    def is_boundary(self, offset: int) -> bool:
        return self.boundary_index(offset) is not None

    def resegment(self, data: bytes, start: int, end: int, inserted: int) -> "Shape":
        """Return the shape of ``data`` after clusters ``[start, end)`` were
        replaced by ``inserted`` bytes.

        Only a window around the edit is segmented again. It opens at the
        cluster before the edit, since a new combining sequence can attach to
        it, and closes at the first new boundary past the inserted bytes that
        also was an old boundary; from there on the old lengths still hold.
        The window doubles until such a boundary turns up or it reaches the
        end of ``data``.
        """

        old_start, old_end = self._offsets[start], self._offsets[end]
        delta = inserted - (old_end - old_start)
        edit_end = old_start + inserted
        first = start - 1 if start > 0 else 0
        window_start = self._offsets[first]
        context = RESEGMENT_CONTEXT

        while True:
            stop = min(end + context, len(self._lengths))
            at_tail = stop == len(self._lengths)
            window_end = self._offsets[stop] + delta
            window = decode(data[window_start:window_end])

            found = self._align(window, window_start, window_end, edit_end, delta, at_tail)
            if found is not None:
                lengths, resume = found
                return Shape(self._lengths[:first] + tuple(lengths) + self._lengths[resume:])

            record_event(
                "resegment.grow",
                level="debug",
                data={"start": start, "end": end, "context": context},
            )
            context *= 2

    def _align(
        self,
        window: str,
        position: int,
        window_end: int,
        edit_end: int,
        delta: int,
        at_tail: bool,
    ) -> Optional[Tuple[List[int], int]]:
        lengths: List[int] = []
        if position >= edit_end:
            resume = self.boundary_index(position - delta)
            if resume is not None:
                return lengths, resume

        for cluster in iter_clusters(window):
            size = len(cluster.encode("utf-8"))
            position += size
            lengths.append(size)
            # A break at the window's own end is forced by truncation.
            if position < edit_end or (position == window_end and not at_tail):
                continue
            resume = self.boundary_index(position - delta)
            if resume is not None:
                return lengths, resume
        return None


def full_shape(data: bytes) -> Shape:
    """Segment ``data`` from scratch."""

    return Shape.from_text(decode(data))


def render_shape(data: bytes, shape: Shape) -> str:
    """One row per cluster: index, byte offset, byte length, escaped text."""

    if not shape:
        return ""
    index_width = len(str(len(shape) - 1))
    offset_width = len(str(shape.byte_length))
    length_width = len(str(max(shape)))
    rows = []
    for index, length in enumerate(shape):
        begin, end = shape.span(index)
        cluster = data[begin:end].decode("utf-8")
        escaped = cluster.encode("unicode_escape").decode("ascii")
        rows.append(
            f"{index:>{index_width}} {begin:>{offset_width}} "
            f"{length:>{length_width}} {escaped}\n"
        )
    return "".join(rows)


__all__ = ["RESEGMENT_CONTEXT", "Shape", "full_shape", "render_shape"]
