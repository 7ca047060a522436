"""Grapheme cluster segmentation and UTF-8 input checks.

Segmentation is delegated to the ``regex`` package, whose ``\\X`` token
matches one extended grapheme cluster.
"""

from __future__ import annotations

from typing import Iterator, List, Tuple, Union

import regex

from .errors import MalformedTextError

RawText = Union[str, bytes, bytearray, memoryview]

_CLUSTER = regex.compile(r"\X")


def segment(text: str) -> List[str]:
    """Split ``text`` into grapheme clusters, left to right."""

    if not text:
        return []
    return _CLUSTER.findall(text)


def iter_clusters(text: str) -> Iterator[str]:
    for match in _CLUSTER.finditer(text):
        yield match.group()


def cluster_lengths(text: str) -> List[int]:
    """Byte length of every cluster of ``text`` once encoded as UTF-8."""

    return [len(cluster.encode("utf-8")) for cluster in segment(text)]


def encode(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise MalformedTextError(
            f"Text is not encodable as UTF-8: {exc.reason}", index=exc.start
        ) from exc


def decode(raw: Union[bytes, bytearray, memoryview]) -> str:
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedTextError(
            f"Invalid UTF-8 at byte {exc.start}: {exc.reason}", index=exc.start
        ) from exc


def normalize(value: RawText) -> Tuple[str, bytes]:
    """Return ``(text, utf8_bytes)`` for raw input, rejecting malformed data."""

    if isinstance(value, str):
        return value, encode(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        return decode(data), data
    raise TypeError(f"Expected str or bytes, not {type(value).__name__}")


__all__ = [
    "RawText",
    "segment",
    "iter_clusters",
    "cluster_lengths",
    "encode",
    "decode",
    "normalize",
]
