"""Newline classification and line/coordinate helpers over a shaped buffer."""

from __future__ import annotations

from typing import Iterator, List, Protocol, Tuple, Union, runtime_checkable

from .errors import OutOfRangeError
from .shape import Shape

Coordinates = Tuple[int, int]  # (line, column), both 0-based grapheme counts

# Mandatory line breaks of UAX #14; "\r\n" is a single grapheme cluster.
NEWLINES = frozenset({"\n", "\r", "\r\n", "\x0b", "\x0c", "\x85", "\u2028", "\u2029"})
NEWLINE_BYTES = frozenset(newline.encode("utf-8") for newline in NEWLINES)


@runtime_checkable
class SupportsNewline(Protocol):
    """Anything that can say whether it terminates a line."""

    def is_newline(self) -> bool:
        ...


def is_newline(unit: Union[str, bytes, SupportsNewline]) -> bool:
    if isinstance(unit, str):
        return unit in NEWLINES
    if isinstance(unit, bytes):
        return unit in NEWLINE_BYTES
    return unit.is_newline()


def newline_indices(data: bytes, shape: Shape) -> Iterator[int]:
    offsets = shape.offsets
    for index in range(len(shape)):
        if data[offsets[index] : offsets[index + 1]] in NEWLINE_BYTES:
            yield index


def line_spans(
    data: bytes, shape: Shape, *, keepends: bool = False
) -> Iterator[Tuple[int, int]]:
    """Grapheme ranges of each line.

    A trailing empty line follows a final terminator, so there is always one
    more line than there are newlines.
    """

    begin = 0
    for index in newline_indices(data, shape):
        yield begin, index + 1 if keepends else index
        begin = index + 1
    yield begin, len(shape)


def coordinates(data: bytes, shape: Shape, index: int) -> Coordinates:
    line = 0
    last = -1
    for newline in newline_indices(data, shape):
        if newline >= index:
            break
        line += 1
        last = newline
    return line, index - last - 1


def index_at(data: bytes, shape: Shape, position: Coordinates) -> int:
    """Inverse of :func:`coordinates`.

    A terminator occupies the last column of its line; only the last line has a
    column one past its final grapheme.
    """

    line, column = position
    spans = list(line_spans(data, shape, keepends=True))
    if 0 <= line < len(spans) and column >= 0:
        begin, end = spans[line]
        width = end - begin
        if column < width or (line == len(spans) - 1 and column == width):
            return begin + column
    raise OutOfRangeError(
        f"Coordinates {position} do not exist in a string of {len(spans)} lines",
        length=len(shape),
    )


def line_shape(data: bytes, shape: Shape) -> Tuple[int, ...]:
    """Maximum column index of every line, terminator included."""

    return tuple(
        max(end - begin - 1, 0)
        for begin, end in line_spans(data, shape, keepends=True)
    )


def _digit_rows(first: int, last: int, indent: str) -> List[str]:
    width = len(str(last + 1))
    labels = [f"{value:0{width}d}" for value in range(first, last + 1)]
    return [f"{indent} " + " ".join(label[row] for label in labels) for row in range(width)]


def _display(cluster: str) -> str:
    if cluster in NEWLINES:
        return cluster.encode("unicode_escape").decode("ascii")
    return cluster


def layout_string(data: bytes, shape: Shape) -> str:
    """Render every grapheme with its row, column, and position.

    The top header numbers the columns of the widest row. Each row then gets
    its own column header, a row label on the left, and positions underneath
    (written vertically when they need several digits). The last row extends
    one column past the end, where an append would land.
    """

    widths = line_shape(data, shape)
    last_row = len(widths) - 1
    indent = " " * len(str(last_row))
    max_column = max(max(widths), widths[-1] + 1)

    rows: List[str] = []
    header_width = len(str(max_column))
    labels = [f"{value:0{header_width}d}" for value in range(max_column + 1)]
    for digit in range(header_width):
        rows.append(f"{indent} " + " ".join(label[digit] for label in labels))
    rows.append("")

    offsets = shape.offsets
    position = 0
    for row, (begin, end) in enumerate(line_spans(data, shape, keepends=True)):
        column_max = widths[row] + (1 if row == last_row else 0)
        rows.extend(_digit_rows(0, column_max, indent))
        cells = [
            _display(data[offsets[index] : offsets[index + 1]].decode("utf-8"))
            for index in range(begin, end)
        ]
        rows.append(f"{row:0{len(indent)}d} " + " ".join(cells))
        rows.extend(_digit_rows(position, position + column_max, indent))
        rows.append("")
        position += widths[row] + 1

    return "\n".join(rows) + "\n"


__all__ = [
    "Coordinates",
    "NEWLINES",
    "SupportsNewline",
    "is_newline",
    "newline_indices",
    "line_spans",
    "coordinates",
    "index_at",
    "line_shape",
    "layout_string",
]
