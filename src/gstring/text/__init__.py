"""Grapheme-indexed string, its shape, views, and search helpers."""

from .errors import (
    GStringError,
    InvalidRangeError,
    MalformedTextError,
    OutOfRangeError,
    StaleViewError,
)
from .grapheme import Grapheme
from .gstring import GString, TextLike
from .lines import NEWLINES, Coordinates
from .segmenter import segment
from .shape import Shape, full_shape
from .traits import (
    SupportsGString,
    SupportsNewline,
    graphemes,
    graphemes_iter,
    gstring,
    is_newline,
)
from .validation import RangeLike
from .views import (
    BytesView,
    CharsView,
    GraphemesView,
    GStringView,
    LinesView,
    NewlinesView,
)

__all__ = [
    "GString",
    "GStringView",
    "Grapheme",
    "Shape",
    "full_shape",
    "segment",
    "TextLike",
    "RangeLike",
    "Coordinates",
    "NEWLINES",
    "GraphemesView",
    "CharsView",
    "BytesView",
    "LinesView",
    "NewlinesView",
    "SupportsGString",
    "SupportsNewline",
    "gstring",
    "graphemes",
    "graphemes_iter",
    "is_newline",
    "GStringError",
    "OutOfRangeError",
    "InvalidRangeError",
    "MalformedTextError",
    "StaleViewError",
]
