from __future__ import annotations

import pytest

from gstring import GString, Grapheme, MalformedTextError, OutOfRangeError
from gstring.text import InvalidRangeError

S = "a\u0310e\u0301o\u0308\u0332"
CLUSTERS = ["a\u0310", "e\u0301", "o\u0308\u0332"]


def test_len_counts_graphemes_not_code_points() -> None:
    s = GString(S)

    assert len(s) == 3
    assert s.len() == 3
    assert len(s.chars()) == 7
    assert len(s.bytes()) == len(S.encode("utf-8"))


def test_graphemes_round_trip() -> None:
    text = "Zo\u0308e\u0308 \U0001f469\u200d\U0001f4bb\r\nok"
    s = GString(text)

    assert "".join(str(g) for g in s.graphemes()) == text
    assert str(s) == text
    assert s.to_str() == text


def test_graphemes_align_with_shape() -> None:
    s = GString(S)

    assert [str(g) for g in s.graphemes()] == CLUSTERS
    assert s.shape() == (3, 3, 5)
    assert sum(s.shape()) == len(s.bytes())


def test_empty_string() -> None:
    s = GString()

    assert s.is_empty()
    assert not s
    assert len(s) == 0
    assert s.bytes() == b""
    assert s.shape() == ()
    assert s.graphemes() == ()
    assert GString.new() == s


def test_get_returns_grapheme_or_none() -> None:
    s = GString(S)

    assert s.get(0) == "a\u0310"
    assert s.get(1) == Grapheme("e\u0301")
    assert s.get(2) == "o\u0308\u0332"
    assert s.get(3) is None
    assert s.get(-1) is None
    assert s.get(True) is None
    assert s.get(False) is None


def test_getitem_is_strict() -> None:
    s = GString(S)

    assert s[2] == "o\u0308\u0332"
    assert s[1:] == "e\u0301o\u0308\u0332"
    assert s[:] == S
    with pytest.raises(OutOfRangeError):
        s[3]
    with pytest.raises(OutOfRangeError):
        s[-1]
    with pytest.raises(OutOfRangeError):
        s[0:4]
    with pytest.raises(InvalidRangeError):
        s[::2]


def test_from_bytes_validates_utf8() -> None:
    assert GString.from_bytes(S.encode("utf-8")) == S

    with pytest.raises(MalformedTextError) as info:
        GString.from_bytes(b"ab\xff")
    assert info.value.index == 2
    assert isinstance(info.value.__cause__, UnicodeDecodeError)


def test_lone_surrogate_is_rejected() -> None:
    with pytest.raises(MalformedTextError):
        GString("a\ud800")


def test_equality_and_repr() -> None:
    s = GString(S)

    assert s == GString(S)
    assert s == S
    assert s != GString("")
    assert s != "a"
    assert repr(GString("ab")) == "GString('ab')"


def test_copy_is_independent() -> None:
    s = GString("abc")
    t = s.copy()

    t.push("d")

    assert s == "abc"
    assert t == "abcd"


def test_grapheme_from_str_requires_one_cluster() -> None:
    g = Grapheme.from_str("a\u0310")

    assert g.as_str() == "a\u0310"
    assert g.chars() == ["a", "\u0310"]
    assert g.bytes() == b"\x61\xcc\x90"
    assert g.byte_length == 3
    with pytest.raises(ValueError):
        Grapheme.from_str("ab")
    with pytest.raises(ValueError):
        Grapheme.from_str("")


def test_shape_string_lists_every_cluster() -> None:
    s = GString("a\u0310b\n")

    assert s.shape_string() == "0 0 3 a\\u0310\n1 3 1 b\n2 4 1 \\n\n"
    assert GString().shape_string() == ""


def test_to_dict_lists_clusters_and_shape() -> None:
    s = GString("a\u0310\r\nb")

    assert s.to_dict() == {
        "data": [{"data": "a\u0310"}, {"data": "\r\n"}, {"data": "b"}],
        "shape": [3, 2, 1],
    }
    assert GString().to_dict() == {"data": [], "shape": []}
    assert Grapheme("e\u0301").to_dict() == {"data": "e\u0301"}
