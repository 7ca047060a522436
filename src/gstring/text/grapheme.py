"""Single grapheme cluster value type."""

from __future__ import annotations

import builtins
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List

from .lines import NEWLINES
from .segmenter import encode, normalize, segment

if TYPE_CHECKING:
    from .gstring import GString


@dataclass(frozen=True, slots=True, eq=False)
class Grapheme:
    """One user-perceived character.

    Instances are immutable copies, so a grapheme taken out of a ``GString``
    stays valid however the string is edited afterwards.
    """

    data: str

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("grapheme cannot be empty")

    @classmethod
    def from_str(cls, text: str | builtins.bytes) -> "Grapheme":
        """Build a grapheme from text holding exactly one cluster."""

        text, _ = normalize(text)
        clusters = segment(text)
        if len(clusters) != 1:
            raise ValueError(
                f"Input must contain exactly 1 grapheme, found {len(clusters)}"
            )
        return cls(clusters[0])

    def as_str(self) -> str:
        return self.data

    def chars(self) -> List[str]:
        return list(self.data)

    def bytes(self) -> builtins.bytes:
        return encode(self.data)

    @property
    def byte_length(self) -> int:
        return len(self.bytes())

    def is_newline(self) -> bool:
        return self.data in NEWLINES

    def gstring(self) -> "GString":
        from .gstring import GString

        return GString(self.data)

    def to_dict(self) -> Dict[str, str]:
        return {"data": self.data}

    def __str__(self) -> str:
        return self.data

    def __repr__(self) -> str:
        return f"Grapheme({self.data!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Grapheme):
            return self.data == other.data
        if isinstance(other, str):
            return self.data == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.data)


__all__ = ["Grapheme"]
