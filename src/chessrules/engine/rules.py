from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List

from .board import Board, BoardState, Color, Piece, StateKind
from .coords import File, Position, Rank
from .errors import (
    EmptyStartingSquare,
    FileParseError,
    FriendlyFire,
    InvalidPath,
    NoMotion,
    NotYourTurn,
    PathIsBlocked,
)


PAWN_TOO_FAR_VERTICAL = "Pawn cannot move more than two spaces vertically"
PAWN_TOO_FAR_HORIZONTAL = "Pawn cannot move more than one space horizontally"
PAWN_DOUBLE_STEP_OFF_HOME = "Pawn must be on its starting square to move two spaces"
PAWN_DIAGONAL_WITHOUT_CAPTURE = "Pawn cannot move diagonally without capturing"
PAWN_SIDEWAYS = "Pawn cannot move purely horizontally"
PAWN_LONG_CAPTURE = "Pawn can only capture one space diagonally"
PAWN_FORWARD_CAPTURE = "Pawn cannot capture straight ahead"
ROOK_NOT_STRAIGHT = "Rook must move in a purely vertical or horizontal line"
KNIGHT_NOT_L_SHAPED = (
    "Knight must move either two spaces horizontally and one space vertically, "
    "or two spaces vertically and one space horizontally"
)
BISHOP_NOT_DIAGONAL = "Bishop must move in a purely diagonal line"
KING_TOO_FAR = "King cannot move more than one space in any direction"
QUEEN_NOT_LINEAR = "Queen must move in a purely vertical, horizontal, or diagonal line"


@dataclass(frozen=True)
class Move:
    """A requested move between two squares.

    Attributes:
        start (Position): Origin square.
        end (Position): Destination square.
    """

    start: Position
    end: Position

    def to_str(self) -> str:
        """Serialize as two algebraic squares, e.g. ``"e2e4"``."""
        return str(self.start) + str(self.end)


def parse_move(s: str) -> Move:
    """Parse a move written as two algebraic squares (``"e2e4"``).

    Raises:
        FileParseError: If the string is not four characters long or a file
            letter is invalid.
        RankParseError: If a rank digit is invalid.
    """
    s = s.strip()
    if len(s) != 4:
        raise FileParseError(f"Invalid move: {s!r}")
    return Move(Position.parse(s[0:2]), Position.parse(s[2:4]))


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def _line(start: Position, end: Position) -> List[Position]:
    # Straight or diagonal walk from start (exclusive) to end (inclusive)
    df = _sign(end.file - start.file)
    dr = _sign(end.rank - start.rank)
    path: List[Position] = []
    f, r = int(start.file), int(start.rank)
    while (f, r) != (end.file, end.rank):
        f += df
        r += dr
        path.append(Position(File(f), Rank(r)))
    return path


def _diffs(start: Position, end: Position) -> tuple[int, int]:
    return abs(end.file - start.file), abs(end.rank - start.rank)


def pawn_path(color: Color, start: Position, end: Position, capturing: bool) -> List[Position]:
    fd, rd = _diffs(start, end)
    if rd > 2:
        raise InvalidPath(PAWN_TOO_FAR_VERTICAL)
    if fd > 1:
        raise InvalidPath(PAWN_TOO_FAR_HORIZONTAL)
    if rd == 2 and start.rank is not color.home_rank:
        raise InvalidPath(PAWN_DOUBLE_STEP_OFF_HOME)
    if fd == 1 and not capturing:
        raise InvalidPath(PAWN_DIAGONAL_WITHOUT_CAPTURE)
    if rd == 0:
        raise InvalidPath(PAWN_SIDEWAYS)
    if fd == 1 and rd != 1:
        raise InvalidPath(PAWN_LONG_CAPTURE)
    if fd == 0 and capturing:
        raise InvalidPath(PAWN_FORWARD_CAPTURE)
    return _line(start, end)


def rook_path(start: Position, end: Position) -> List[Position]:
    fd, rd = _diffs(start, end)
    if (fd == 0) == (rd == 0):
        raise InvalidPath(ROOK_NOT_STRAIGHT)
    return _line(start, end)


def knight_path(start: Position, end: Position) -> List[Position]:
    if sorted(_diffs(start, end)) != [1, 2]:
        raise InvalidPath(KNIGHT_NOT_L_SHAPED)
    return [end]


def bishop_path(start: Position, end: Position) -> List[Position]:
    fd, rd = _diffs(start, end)
    if fd != rd or fd == 0:
        raise InvalidPath(BISHOP_NOT_DIAGONAL)
    return _line(start, end)


def king_path(start: Position, end: Position) -> List[Position]:
    fd, rd = _diffs(start, end)
    if fd > 1 or rd > 1 or fd + rd == 0:
        raise InvalidPath(KING_TOO_FAR)
    return [end]


def queen_path(start: Position, end: Position) -> List[Position]:
    fd, rd = _diffs(start, end)
    straight = (fd == 0) != (rd == 0)
    diagonal = fd == rd and fd != 0
    if not (straight or diagonal):
        raise InvalidPath(QUEEN_NOT_LINEAR)
    return _line(start, end)


_PATHS: Dict[Piece, Callable[[Position, Position], List[Position]]] = {
    Piece.Rook: rook_path,
    Piece.Knight: knight_path,
    Piece.Bishop: bishop_path,
    Piece.King: king_path,
    Piece.Queen: queen_path,
}


def path_for(
    piece: Piece, color: Color, start: Position, end: Position, capturing: bool = False
) -> List[Position]:
    """Compute the squares a piece traverses from ``start`` to ``end``.

    Args:
        piece (Piece): Kind of the moving troop.
        color (Color): Side of the moving troop; decides the pawn home rank.
        start (Position): Origin square (excluded from the result).
        end (Position): Destination square (always the last element).
        capturing (bool): Whether ``end`` holds an enemy troop. Pawns may only
            move diagonally when this is set.

    Returns:
        List[Position]: Intermediate squares in travel order, then ``end``.

    Raises:
        InvalidPath: If the geometry is illegal for ``piece``.
    """
    if piece is Piece.Pawn:
        return pawn_path(color, start, end, capturing)
    return _PATHS[piece](start, end)


def _next_state(state: BoardState) -> BoardState:
    if state.kind is StateKind.ToMove and state.color is not None:
        return BoardState.to_move(state.color.opposite)
    # Leaving Check needs check detection, which the engine does not have yet
    raise NotImplementedError(f"no turn transition from state {state}")


def move_troop(board: Board, start: Position, end: Position) -> None:
    """Validate a move and apply it to ``board`` in place.

    All checks run before anything is mutated, so the board is unchanged
    whenever an exception is raised.

    Raises:
        NoMotion: ``start`` equals ``end``.
        EmptyStartingSquare: Nothing stands on ``start``.
        NotYourTurn: The board state does not allow the troop's color to move.
        FriendlyFire: ``end`` holds a troop of the same color.
        InvalidPath: The geometry is illegal for the moving piece.
        PathIsBlocked: A square between ``start`` and ``end`` is occupied
            (never raised for knights).
        NotImplementedError: The state is ``Check`` and the move is otherwise
            legal; transitions out of check are not implemented.
    """
    if start == end:
        raise NoMotion()
    troop = board.troop_at(start)
    if troop is None:
        raise EmptyStartingSquare()
    if not board.state.can_move(troop.color):
        raise NotYourTurn()

    target = board.troop_at(end)
    capturing = False
    if target is not None:
        if target.color is troop.color:
            raise FriendlyFire()
        capturing = True

    path = path_for(troop.piece, troop.color, start, end, capturing)
    if troop.piece is not Piece.Knight:
        for position in path[:-1]:
            if board.troop_at(position) is not None:
                raise PathIsBlocked()

    next_state = _next_state(board.state)

    board.remove_troop(start)
    board.replace_troop(end, replace(troop, position=end))
    board.set_state(next_state)


def apply_moves(board: Board, moves: Iterable[str]) -> None:
    """Apply moves written like ``"e2e4"`` in order, stopping at the first error."""
    for text in moves:
        mv = parse_move(text)
        move_troop(board, mv.start, mv.end)
