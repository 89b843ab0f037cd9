from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from ..config import get_settings
from ..engine.board import Board
from ..engine.tsb import ParseError
from ..protocol.hint.loop import run_hints


EXIT_OK = 0
EXIT_UNSOLVABLE = 1
EXIT_USAGE = 2
EXIT_NO_FILE = 3
EXIT_PARSE = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tumblestone", description="Solve a Tumblestone puzzle one hint at a time"
    )
    parser.add_argument("file", nargs="?", help="Board file in TSB format")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API instead")
    parser.add_argument("--host", default=None, help="HTTP bind address (with --serve)")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (with --serve)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper(), stream=sys.stderr)

    if args.serve:
        uvicorn.run(
            "tumblestone.protocol.http.app:create_app",
            factory=True,
            host=args.host or settings.host,
            port=args.port or settings.port,
        )
        return EXIT_OK

    if args.file is None:
        parser.print_usage(sys.stderr)
        print("tumblestone: error: a board file is required", file=sys.stderr)
        return EXIT_USAGE
    try:
        with open(args.file, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        print(f"tumblestone: cannot read {args.file}: {e.strerror or e}", file=sys.stderr)
        return EXIT_NO_FILE
    try:
        board = Board.from_tsb(text)
    except ParseError as e:
        print(f"tumblestone: {args.file}: {e.kind}: {e}", file=sys.stderr)
        return EXIT_PARSE

    color = settings.color and not args.no_color
    return EXIT_OK if run_hints(board, color=color) else EXIT_UNSOLVABLE


if __name__ == "__main__":
    sys.exit(main())
