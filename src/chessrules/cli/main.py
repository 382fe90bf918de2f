from __future__ import annotations

import argparse
import os
from typing import List, Optional

import uvicorn


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the chess rules HTTP API")
    parser.add_argument(
        "--host",
        type=str,
        default=os.environ.get("CHESSRULES_HOST", DEFAULT_HOST),
        help=f"Bind address (env CHESSRULES_HOST, default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("CHESSRULES_PORT", DEFAULT_PORT)),
        help=f"Bind port (env CHESSRULES_PORT, default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.environ.get("CHESSRULES_LOG_LEVEL", "info"),
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level (env CHESSRULES_LOG_LEVEL, default: info)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    uvicorn.run(
        "chessrules.protocol.http.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
