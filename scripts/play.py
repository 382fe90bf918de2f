#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import sys

# Allow running this script directly via `python scripts/play.py`
# by adding src/ to sys.path.
SRC_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from chessrules.engine.board import Board
from chessrules.engine.errors import ChessError
from chessrules.engine.rules import apply_moves


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Play moves from the starting position and print the board"
    )
    parser.add_argument("moves", nargs="*", help="Moves such as e2e4 g8f6")
    parser.add_argument("--json", action="store_true", help="Print the serialized board")
    args = parser.parse_args()

    board = Board.default()
    try:
        apply_moves(board, args.moves)
    except ChessError as e:
        print(f"error: {e.message}", file=sys.stderr)
        print(board.render(), end="")
        sys.exit(1)

    if args.json:
        print(json.dumps(board.to_dict(), indent=2))
    else:
        print(board.render(), end="")
        print(f"state={board.state}")


if __name__ == "__main__":
    main()
