from __future__ import annotations

import logging
import sys
from typing import Callable, Optional

from ...engine.board import Board
from ...engine.render import render
from ...search.service import SolveService


logger = logging.getLogger(__name__)

Writer = Callable[[str], None]
Reader = Callable[[], str]

PROMPT = "Press \x1b[38;5;15m[Enter]\x1b[0m for next hint."
PLAIN_PROMPT = "Press [Enter] for next hint."
NO_SOLUTION = "\x1b[38;5;11mNo solution exists.\x1b[0m"
PLAIN_NO_SOLUTION = "No solution exists."


class HintLoop:
    """Walks a player through a solution one move at a time.

    Notes:
    - The board is solved once up front; each hint then renders the board
      with the next move highlighted, applies it with ``force_remove`` and
      waits for the player.
    - I/O is injected so the loop can be driven from tests.
    """

    def __init__(
        self,
        board: Board,
        write: Writer,
        read: Reader,
        *,
        color: bool = True,
        service: Optional[SolveService] = None,
    ) -> None:
        self.board = board
        self.write = write
        self.read = read
        self.color = color
        self.service = service or SolveService()

    def run(self) -> bool:
        res = self.service.solve(self.board)
        if res.moves is None:
            self.write(NO_SOLUTION if self.color else PLAIN_NO_SOLUTION)
            return False
        logger.info("presenting solution", extra={"moves": len(res.moves)})
        for m in res.moves:
            self.write(render(self.board, m, color=self.color))
            self.board.force_remove(m)
            self.write(PROMPT if self.color else PLAIN_PROMPT)
            self.read()
        self.write(render(self.board, color=self.color))
        return True


def _default_writer(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def _default_reader() -> str:
    return sys.stdin.readline()


def run_hints(board: Board, *, color: bool = True) -> bool:
    return HintLoop(board, _default_writer, _default_reader, color=color).run()
