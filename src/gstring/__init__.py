"""Mutable strings addressed by Unicode extended grapheme cluster."""

from .text import (
    GString,
    GStringError,
    GStringView,
    Grapheme,
    InvalidRangeError,
    MalformedTextError,
    OutOfRangeError,
    StaleViewError,
    graphemes,
    graphemes_iter,
    gstring,
    is_newline,
)

__all__ = [
    "GString",
    "GStringView",
    "Grapheme",
    "gstring",
    "graphemes",
    "graphemes_iter",
    "is_newline",
    "GStringError",
    "OutOfRangeError",
    "InvalidRangeError",
    "MalformedTextError",
    "StaleViewError",
    "text",
    "runtime",
]

__version__ = "0.1.0"
