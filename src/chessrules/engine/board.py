from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from .coords import File, Position, Rank
from .errors import (
    BoardFormatError,
    BoardInvariantError,
    SquareOccupiedError,
)


class Piece(Enum):
    Pawn = "Pawn"
    Knight = "Knight"
    Bishop = "Bishop"
    Rook = "Rook"
    Queen = "Queen"
    King = "King"


class Color(Enum):
    White = "White"
    Black = "Black"

    @property
    def opposite(self) -> "Color":
        return Color.Black if self is Color.White else Color.White

    @property
    def home_rank(self) -> Rank:
        """Rank from which this side's pawns may advance two squares."""
        return Rank.Two if self is Color.White else Rank.Seven


BACK_RANK = [
    Piece.Rook,
    Piece.Knight,
    Piece.Bishop,
    Piece.Queen,
    Piece.King,
    Piece.Bishop,
    Piece.Knight,
    Piece.Rook,
]

GLYPHS = {
    (Color.White, Piece.Pawn): "♙",
    (Color.White, Piece.Knight): "♘",
    (Color.White, Piece.Bishop): "♗",
    (Color.White, Piece.Rook): "♖",
    (Color.White, Piece.Queen): "♕",
    (Color.White, Piece.King): "♔",
    (Color.Black, Piece.Pawn): "♟",
    (Color.Black, Piece.Knight): "♞",
    (Color.Black, Piece.Bishop): "♝",
    (Color.Black, Piece.Rook): "♜",
    (Color.Black, Piece.Queen): "♛",
    (Color.Black, Piece.King): "♚",
}
EMPTY_GLYPH = "."


@dataclass(frozen=True)
class Troop:
    """A piece of one color standing on ``position``."""

    piece: Piece
    color: Color
    position: Position

    def to_dict(self) -> Dict[str, Any]:
        return {
            "piece": self.piece.value,
            "color": self.color.value,
            "position": self.position.to_dict(),
        }


@dataclass
class Square:
    position: Position
    troop: Optional[Troop] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "troop": self.troop.to_dict() if self.troop is not None else None,
            "position": self.position.to_dict(),
        }


class StateKind(Enum):
    ToMove = "ToMove"
    Check = "Check"
    Checkmate = "Checkmate"
    Stalemate = "Stalemate"
    Draw = "Draw"


_COLORED_STATES = (StateKind.ToMove, StateKind.Check, StateKind.Checkmate)


@dataclass(frozen=True)
class BoardState:
    """Whose turn it is, or how the game ended.

    Only ``ToMove`` is produced by the engine today. ``Check``, ``Checkmate``,
    ``Stalemate`` and ``Draw`` can be set explicitly and round-trip through
    serialization.
    """

    kind: StateKind
    color: Optional[Color] = None

    def __post_init__(self) -> None:
        if (self.kind in _COLORED_STATES) != (self.color is not None):
            raise ValueError(f"invalid color {self.color!r} for state {self.kind.value}")

    @classmethod
    def to_move(cls, color: Color) -> "BoardState":
        return cls(StateKind.ToMove, color)

    @classmethod
    def check(cls, color: Color) -> "BoardState":
        return cls(StateKind.Check, color)

    @classmethod
    def checkmate(cls, color: Color) -> "BoardState":
        return cls(StateKind.Checkmate, color)

    @classmethod
    def stalemate(cls) -> "BoardState":
        return cls(StateKind.Stalemate)

    @classmethod
    def draw(cls) -> "BoardState":
        return cls(StateKind.Draw)

    def can_move(self, color: Color) -> bool:
        if self.kind in (StateKind.ToMove, StateKind.Check):
            return self.color is color
        return False

    def to_wire(self) -> Any:
        if self.color is None:
            return self.kind.value
        return {self.kind.value: self.color.value}

    @classmethod
    def from_wire(cls, data: Any) -> "BoardState":
        try:
            if isinstance(data, str):
                return cls(StateKind(data))
            if isinstance(data, dict) and len(data) == 1:
                ((tag, color),) = data.items()
                return cls(StateKind(tag), Color(color))
        except ValueError as e:
            raise BoardFormatError(f"Invalid board state: {data!r}") from e
        raise BoardFormatError(f"Invalid board state: {data!r}")

    def __str__(self) -> str:
        if self.color is None:
            return self.kind.value
        return f"{self.kind.value}({self.color.value})"


def _default_troop(position: Position) -> Optional[Troop]:
    if position.rank is Rank.Two:
        return Troop(Piece.Pawn, Color.White, position)
    if position.rank is Rank.Seven:
        return Troop(Piece.Pawn, Color.Black, position)
    if position.rank is Rank.One:
        return Troop(BACK_RANK[position.file - 1], Color.White, position)
    if position.rank is Rank.Eight:
        return Troop(BACK_RANK[position.file - 1], Color.Black, position)
    return None


@dataclass
class Board:
    """An 8x8 board plus the game state.

    Notes:
    - ``squares`` holds exactly 64 entries indexed by ``Position.index``
      (a1=0 .. h8=63).
    - The raw mutators here skip every legality check. Gameplay goes through
      ``move_troop``.
    """

    squares: List[Square]
    state: BoardState = field(default_factory=lambda: BoardState.to_move(Color.White))

    @classmethod
    def default(cls) -> "Board":
        """Create a board in the standard starting position, White to move."""
        return cls(squares=[Square(p, _default_troop(p)) for p in Position.all()])

    @classmethod
    def empty(cls, state: Optional[BoardState] = None) -> "Board":
        board = cls(squares=[Square(p) for p in Position.all()])
        if state is not None:
            board.state = state
        return board

    def reset(self) -> None:
        """Discard all placement and state, restoring the starting position."""
        fresh = Board.default()
        self.squares = fresh.squares
        self.state = fresh.state

    def copy(self) -> "Board":
        return Board(
            squares=[Square(sq.position, sq.troop) for sq in self.squares],
            state=self.state,
        )

    # --- Raw accessors ---
    def square(self, position: Position) -> Square:
        try:
            sq = self.squares[position.index]
        except (IndexError, AttributeError, TypeError) as e:
            raise BoardInvariantError(f"no square for {position!r}") from e
        if sq.position != position:
            raise BoardInvariantError(f"square {sq.position} stored at {position}")
        return sq

    def troop_at(self, position: Position) -> Optional[Troop]:
        return self.square(position).troop

    def place_troop(self, troop: Troop) -> None:
        """Put ``troop`` on its own position, which must be empty.

        Raises:
            SquareOccupiedError: If the square already holds a troop.
        """
        sq = self.square(troop.position)
        if sq.troop is not None:
            raise SquareOccupiedError(f"Square {troop.position} is occupied")
        sq.troop = troop

    def remove_troop(self, position: Position) -> Optional[Troop]:
        sq = self.square(position)
        troop, sq.troop = sq.troop, None
        return troop

    def replace_troop(self, position: Position, troop: Optional[Troop]) -> Optional[Troop]:
        """Overwrite the occupant of ``position`` and return the displaced one."""
        sq = self.square(position)
        displaced = sq.troop
        if troop is not None and troop.position != position:
            troop = replace(troop, position=position)
        sq.troop = troop
        return displaced

    def set_state(self, state: BoardState) -> None:
        self.state = state

    def move_troop(self, start: Position, end: Position) -> None:
        """Validate and apply a move. See ``rules.move_troop``."""
        from .rules import move_troop

        move_troop(self, start, end)

    # --- Views ---
    def render(self) -> str:
        """Return an 8x8 glyph grid, rank 1 on the first line."""
        lines: List[str] = []
        for rank in Rank:
            row = []
            for file in File:
                troop = self.troop_at(Position(file, rank))
                row.append(EMPTY_GLYPH if troop is None else GLYPHS[(troop.color, troop.piece)])
            lines.append("".join(row) + "\n")
        return "".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into the wire form ``{"squares": {file: {rank: square}}, "state": ...}``."""
        squares: Dict[str, Dict[str, Any]] = {}
        for file in File:
            squares[file.name] = {
                rank.name: self.square(Position(file, rank)).to_dict() for rank in Rank
            }
        return {"squares": squares, "state": self.state.to_wire()}

    @classmethod
    def from_dict(cls, data: Any) -> "Board":
        """Rebuild a board from its wire form.

        Raises:
            BoardFormatError: If the structure is malformed, a square is
                missing, or a stored position disagrees with its key.
            FileParseError: If a file token is unknown.
            RankParseError: If a rank token is unknown.
        """
        if not isinstance(data, dict):
            raise BoardFormatError("Board must be an object")
        files = data.get("squares")
        if not isinstance(files, dict):
            raise BoardFormatError("Board squares must be an object")
        if "state" not in data:
            raise BoardFormatError("Board state is missing")
        state = BoardState.from_wire(data["state"])

        slots: List[Optional[Square]] = [None] * 64
        for file_name, ranks in files.items():
            file = File.from_name(file_name)
            if not isinstance(ranks, dict):
                raise BoardFormatError(f"File {file_name} must be an object")
            for rank_name, raw in ranks.items():
                position = Position(file, Rank.from_name(rank_name))
                slots[position.index] = _square_from_dict(position, raw)

        missing = [str(Position.from_index(i)) for i, sq in enumerate(slots) if sq is None]
        if missing:
            raise BoardFormatError(f"Board is missing squares: {', '.join(missing)}")
        return cls(squares=[sq for sq in slots if sq is not None], state=state)


def _square_from_dict(position: Position, raw: Any) -> Square:
    if not isinstance(raw, dict):
        raise BoardFormatError(f"Square {position} must be an object")
    if "position" in raw and Position.from_dict(raw["position"]) != position:
        raise BoardFormatError(f"Square {position} has a mismatched position")
    troop_raw = raw.get("troop")
    if troop_raw is None:
        return Square(position)
    if not isinstance(troop_raw, dict):
        raise BoardFormatError(f"Troop on {position} must be an object")
    try:
        piece = Piece(troop_raw.get("piece"))
        color = Color(troop_raw.get("color"))
    except ValueError as e:
        raise BoardFormatError(f"Invalid troop on {position}") from e
    if "position" in troop_raw and Position.from_dict(troop_raw["position"]) != position:
        raise BoardFormatError(f"Troop on {position} has a mismatched position")
    return Square(position, Troop(piece, color, position))
