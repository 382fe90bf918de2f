from __future__ import annotations

import pytest

from chessrules.engine.board import Board, BoardState, Color, Piece, Troop
from chessrules.engine.coords import Position
from chessrules.engine.errors import InvalidPath, PathIsBlocked
from chessrules.engine.rules import move_troop


def sq(s: str) -> Position:
    return Position.parse(s)


def move(board: Board, start: str, end: str) -> None:
    move_troop(board, sq(start), sq(end))


# --- Pawn ---
def test_pawn_single_step(board: Board) -> None:
    move(board, "a2", "a3")
    assert board.state == BoardState.to_move(Color.Black)
    assert board.troop_at(sq("a3")) == Troop(Piece.Pawn, Color.White, sq("a3"))


def test_pawn_double_step_white(board: Board) -> None:
    move(board, "a2", "a4")
    assert board.troop_at(sq("a4")).piece is Piece.Pawn


def test_pawn_double_step_black(board: Board) -> None:
    board.set_state(BoardState.to_move(Color.Black))
    move(board, "a7", "a5")
    assert board.state == BoardState.to_move(Color.White)


def test_pawn_double_step_only_from_home_rank(board: Board) -> None:
    move(board, "e2", "e3")
    move(board, "e7", "e6")
    with pytest.raises(InvalidPath) as exc:
        move(board, "e3", "e5")
    assert exc.value.reason == "Pawn must be on its starting square to move two spaces"


def test_black_pawn_double_step_off_home_rank(empty_board: Board) -> None:
    empty_board.place_troop(Troop(Piece.Pawn, Color.Black, sq("d2")))
    empty_board.set_state(BoardState.to_move(Color.Black))
    with pytest.raises(InvalidPath) as exc:
        move(empty_board, "d2", "d4")
    assert exc.value.reason == "Pawn must be on its starting square to move two spaces"


def test_pawn_capture(board: Board) -> None:
    board.place_troop(Troop(Piece.Pawn, Color.Black, sq("b3")))
    move(board, "a2", "b3")
    assert board.troop_at(sq("b3")) == Troop(Piece.Pawn, Color.White, sq("b3"))
    assert board.troop_at(sq("a2")) is None


def test_pawn_non_capture_diagonal(board: Board) -> None:
    with pytest.raises(InvalidPath) as exc:
        move(board, "a2", "b3")
    assert exc.value == InvalidPath("Pawn cannot move diagonally without capturing")


def test_pawn_two_squares_horizontally(board: Board) -> None:
    with pytest.raises(InvalidPath) as exc:
        move(board, "a2", "c3")
    assert exc.value.reason == "Pawn cannot move more than one space horizontally"


def test_pawn_three_squares_vertically(board: Board) -> None:
    with pytest.raises(InvalidPath) as exc:
        move(board, "a2", "a5")
    assert exc.value.reason == "Pawn cannot move more than two spaces vertically"


def test_pawn_double_step_blocked(board: Board) -> None:
    board.place_troop(Troop(Piece.Knight, Color.Black, sq("c3")))
    with pytest.raises(PathIsBlocked):
        move(board, "c2", "c4")


def test_pawn_cannot_capture_straight_ahead(board: Board) -> None:
    board.place_troop(Troop(Piece.Pawn, Color.Black, sq("c3")))
    with pytest.raises(InvalidPath) as exc:
        move(board, "c2", "c3")
    assert exc.value.reason == "Pawn cannot capture straight ahead"


def test_pawn_cannot_capture_sideways(empty_board: Board) -> None:
    empty_board.place_troop(Troop(Piece.Pawn, Color.White, sq("d4")))
    empty_board.place_troop(Troop(Piece.Pawn, Color.Black, sq("e4")))
    with pytest.raises(InvalidPath) as exc:
        move(empty_board, "d4", "e4")
    assert exc.value.reason == "Pawn cannot move purely horizontally"


def test_pawn_cannot_capture_two_ranks_away(board: Board) -> None:
    board.place_troop(Troop(Piece.Bishop, Color.Black, sq("e4")))
    with pytest.raises(InvalidPath) as exc:
        move(board, "d2", "e4")
    assert exc.value.reason == "Pawn can only capture one space diagonally"


# --- Rook ---
def test_rook_blocked_path(board: Board) -> None:
    with pytest.raises(PathIsBlocked):
        move(board, "a1", "a3")


def test_rook_standard_movement(board: Board) -> None:
    board.remove_troop(sq("a2"))
    move(board, "a1", "a4")
    assert board.troop_at(sq("a4")).piece is Piece.Rook


def test_rook_diagonal_movement(board: Board) -> None:
    with pytest.raises(InvalidPath) as exc:
        move(board, "a1", "c3")
    assert exc.value.reason == "Rook must move in a purely vertical or horizontal line"


def test_rook_captures_at_end_of_open_file(board: Board) -> None:
    board.remove_troop(sq("h2"))
    board.remove_troop(sq("h7"))
    move(board, "h1", "h8")
    assert board.troop_at(sq("h8")) == Troop(Piece.Rook, Color.White, sq("h8"))


# --- Knight ---
def test_knight_standard_movement(board: Board) -> None:
    move(board, "b1", "c3")
    assert board.troop_at(sq("c3")).piece is Piece.Knight


def test_knight_invalid_movement(board: Board) -> None:
    with pytest.raises(InvalidPath) as exc:
        move(board, "b1", "c4")
    assert exc.value.reason == (
        "Knight must move either two spaces horizontally and one space vertically, "
        "or two spaces vertically and one space horizontally"
    )


def test_knight_jumps_over_surrounded_squares(empty_board: Board) -> None:
    empty_board.place_troop(Troop(Piece.Knight, Color.White, sq("d4")))
    for s in ("d5", "e5", "e4", "d3", "c4", "c5"):
        empty_board.place_troop(Troop(Piece.Pawn, Color.White, sq(s)))
    move(empty_board, "d4", "e6")
    assert empty_board.troop_at(sq("e6")).piece is Piece.Knight


# --- Bishop ---
def test_bishop_standard_movement(board: Board) -> None:
    board.remove_troop(sq("d2"))
    move(board, "c1", "f4")
    assert board.troop_at(sq("f4")).piece is Piece.Bishop


def test_bishop_invalid_movement(board: Board) -> None:
    with pytest.raises(InvalidPath) as exc:
        move(board, "c1", "c4")
    assert exc.value.reason == "Bishop must move in a purely diagonal line"


def test_bishop_blocked(board: Board) -> None:
    with pytest.raises(PathIsBlocked):
        move(board, "c1", "f4")


# --- King ---
def test_king_standard_movement(board: Board) -> None:
    board.remove_troop(sq("e2"))
    move(board, "e1", "e2")
    assert board.troop_at(sq("e2")).piece is Piece.King


def test_king_invalid_movement(board: Board) -> None:
    with pytest.raises(InvalidPath) as exc:
        move(board, "e1", "e3")
    assert exc.value.reason == "King cannot move more than one space in any direction"


# --- Queen ---
def test_queen_rook_movement(board: Board) -> None:
    board.remove_troop(sq("d2"))
    move(board, "d1", "d4")
    assert board.troop_at(sq("d4")).piece is Piece.Queen


def test_queen_bishop_movement(board: Board) -> None:
    board.remove_troop(sq("e2"))
    move(board, "d1", "f3")
    assert board.troop_at(sq("f3")).piece is Piece.Queen


def test_queen_invalid_movement(board: Board) -> None:
    with pytest.raises(InvalidPath) as exc:
        move(board, "d1", "e3")
    assert exc.value.reason == "Queen must move in a purely vertical, horizontal, or diagonal line"
