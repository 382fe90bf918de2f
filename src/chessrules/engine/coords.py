from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List

from .errors import FileParseError, RankParseError


def _as_ordinal(value: Any) -> int | None:
    # bool is an int subclass; True must not parse as rank One
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if value < 1 or value > 8:
        return None
    return value


class Rank(IntEnum):
    One = 1
    Two = 2
    Three = 3
    Four = 4
    Five = 5
    Six = 6
    Seven = 7
    Eight = 8

    @classmethod
    def from_int(cls, value: Any) -> "Rank":
        """Convert an ordinal in ``1..8`` into a rank.

        Raises:
            RankParseError: If ``value`` is not an integer in ``1..8``.
        """
        n = _as_ordinal(value)
        if n is None:
            raise RankParseError()
        return cls(n)

    @classmethod
    def from_name(cls, name: Any) -> "Rank":
        """Parse the wire token (``"One"`` .. ``"Eight"``)."""
        if not isinstance(name, str) or name not in cls.__members__:
            raise RankParseError()
        return cls[name]


class File(IntEnum):
    A = 1
    B = 2
    C = 3
    D = 4
    E = 5
    F = 6
    G = 7
    H = 8

    @classmethod
    def from_int(cls, value: Any) -> "File":
        """Convert an ordinal in ``1..8`` into a file.

        Raises:
            FileParseError: If ``value`` is not an integer in ``1..8``.
        """
        n = _as_ordinal(value)
        if n is None:
            raise FileParseError()
        return cls(n)

    @classmethod
    def from_name(cls, name: Any) -> "File":
        """Parse the wire token (``"A"`` .. ``"H"``)."""
        if not isinstance(name, str) or name not in cls.__members__:
            raise FileParseError()
        return cls[name]


@dataclass(frozen=True)
class Position:
    """A square coordinate.

    Attributes:
        file (File): Column ``A``..``H``.
        rank (Rank): Row ``One``..``Eight``.
    """

    file: File
    rank: Rank

    @classmethod
    def of(cls, file: int, rank: int) -> "Position":
        return cls(File.from_int(file), Rank.from_int(rank))

    @classmethod
    def parse(cls, s: str) -> "Position":
        """Parse algebraic notation such as ``"e2"``.

        Raises:
            FileParseError: If the string has the wrong length or a bad file
                letter.
            RankParseError: If the rank digit is outside ``1..8``.
        """
        if not isinstance(s, str) or len(s) != 2:
            raise FileParseError()
        letter, digit = s[0].lower(), s[1]
        if letter < "a" or letter > "h":
            raise FileParseError()
        if digit < "0" or digit > "9":
            raise RankParseError()
        return cls(File(ord(letter) - ord("a") + 1), Rank.from_int(int(digit)))

    @classmethod
    def from_index(cls, idx: int) -> "Position":
        if idx < 0 or idx > 63:
            raise ValueError(f"invalid square index: {idx}")
        return cls(File(idx % 8 + 1), Rank(idx // 8 + 1))

    @classmethod
    def all(cls) -> List["Position"]:
        """All 64 positions, a1 first, rank-major."""
        return [cls.from_index(i) for i in range(64)]

    @property
    def index(self) -> int:
        """Zero-based square index (a1=0 .. h8=63)."""
        return (self.rank - 1) * 8 + (self.file - 1)

    def to_dict(self) -> dict[str, str]:
        return {"file": self.file.name, "rank": self.rank.name}

    @classmethod
    def from_dict(cls, data: Any) -> "Position":
        if not isinstance(data, dict):
            raise FileParseError()
        return cls(File.from_name(data.get("file")), Rank.from_name(data.get("rank")))

    def __str__(self) -> str:
        return chr(ord("a") + self.file - 1) + str(int(self.rank))
