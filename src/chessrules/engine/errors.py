from __future__ import annotations

from typing import Any


class ChessError(ValueError):
    """Base class for user-facing errors raised by the engine.

    Attributes:
        message (str): Human readable text surfaced to API clients.
    """

    message = "Chess error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def __eq__(self, other: Any) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class ParseError(ChessError):
    pass


class RankParseError(ParseError):
    message = "Invalid rank"


class FileParseError(ParseError):
    message = "Invalid file"


class BoardFormatError(ChessError):
    message = "Invalid board"


class SquareOccupiedError(ChessError):
    message = "Square is occupied"


class MoveError(ChessError):
    """A rejected move. The board is left unchanged."""


class EmptyStartingSquare(MoveError):
    message = "Starting square is empty"


class NotYourTurn(MoveError):
    message = "Not your turn"


class FriendlyFire(MoveError):
    message = "Friendly fire is not allowed"


class InvalidPath(MoveError):
    """Geometry violation for the moving piece.

    Attributes:
        reason (str): Fixed description of the violated rule, e.g.
            ``"Bishop must move in a purely diagonal line"``.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid path: {reason}")


class PathIsBlocked(MoveError):
    message = "Path is blocked"


class NoMotion(MoveError):
    message = "No motion"


class BoardInvariantError(RuntimeError):
    """A board lost one of its 64 squares or desynced a troop position."""
