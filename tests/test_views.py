from __future__ import annotations

import pytest

from gstring import GString, OutOfRangeError, StaleViewError
from gstring.text import InvalidRangeError

S = "a\u0310e\u0301o\u0308\u0332"


def test_slice_view() -> None:
    s = GString(S)

    assert s.slice((0, 1)) == "a\u0310"
    assert s.slice(slice(1, 2)) == "e\u0301"
    assert s.slice(range(2, 3)) == "o\u0308\u0332"
    assert s.slice((1, 3)) == "e\u0301o\u0308\u0332"
    assert s.slice((0, 3)) == S
    assert s.slice((3, 3)).is_empty()


def test_slice_rejects_bad_ranges() -> None:
    s = GString(S)

    with pytest.raises(OutOfRangeError):
        s.slice((0, 4))
    with pytest.raises(InvalidRangeError):
        s.slice((2, 1))


def test_view_reads_after_mutation_are_stale() -> None:
    s = GString(S)
    view = s.slice((0, 2))

    s.push("x")

    assert view.is_stale
    with pytest.raises(StaleViewError):
        view.to_str()
    with pytest.raises(StaleViewError):
        len(view)
    assert "stale" in repr(view)


def test_view_copy_survives_mutation() -> None:
    s = GString(S)
    owned = s.slice((1, 3)).to_gstring()

    s.clear()

    assert owned == "e\u0301o\u0308\u0332"
    assert owned.shape() == (3, 5)


def test_view_indexing() -> None:
    view = GString("abcd").slice((1, 4))

    assert view[0] == "b"
    assert view[1:] == "cd"
    assert view.get(2) == "d"
    assert view.get(3) is None
    assert view.get(True) is None
    assert view.shape() == (1, 1, 1)
    assert [str(g) for g in view] == ["b", "c", "d"]
    with pytest.raises(OutOfRangeError):
        view[3]


def test_grapheme_iteration_is_restartable() -> None:
    s = GString(S)
    graphemes = s.iter()

    assert [str(g) for g in graphemes] == ["a\u0310", "e\u0301", "o\u0308\u0332"]
    assert [str(g) for g in graphemes] == ["a\u0310", "e\u0301", "o\u0308\u0332"]
    assert len(graphemes) == 3


def test_iteration_interrupted_by_mutation() -> None:
    s = GString("abc")
    iterator = iter(s)

    assert next(iterator) == "a"
    s.push("d")

    with pytest.raises(StaleViewError):
        next(iterator)


def test_chars_and_bytes_views() -> None:
    s = GString("a\u0310b")

    assert list(s.iter_chars()) == ["a", "\u0310", "b"]
    assert len(s.iter_chars()) == 3
    assert bytes(s.iter_bytes()) == s.bytes()
    assert len(s.iter_bytes()) == 4


def test_graphemes_outlive_edits() -> None:
    s = GString(S)
    first = s.get(0)

    s.drain((0, 3))

    assert first == "a\u0310"
