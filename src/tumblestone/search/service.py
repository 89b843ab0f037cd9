from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..engine.board import Board
from ..engine.point import Point
from .frontier import TripletState, frontier


logger = logging.getLogger(__name__)

# Interpreter frames kept free on top of one frame per move
RECURSION_HEADROOM = 200


@dataclass
class SolveResult:
    moves: Optional[List[Point]]
    nodes: int
    time_ms: int

    @property
    def solvable(self) -> bool:
        return self.moves is not None


class SolveService:
    """Depth-first backtracking solver.

    The board is mutated in place through :meth:`Board.remove` and restored
    with :meth:`Board.undo`; when :meth:`solve` returns, the board is exactly
    as it was passed in.
    """

    def solve(
        self,
        board: Board,
        state: Optional[TripletState] = None,
        *,
        on_node: Optional[Callable[[int, List[Point]], None]] = None,
    ) -> SolveResult:
        """Find a move sequence that clears ``board``.

        Args:
            board (Board): Board to solve; restored before returning.
            state (Optional[TripletState]): Triplet in progress, for solving
                from the middle of a game. Defaults to a fresh triplet.
            on_node (Optional[Callable]): Called after every tentative removal
                with the node count and the moves so far.

        Returns:
            SolveResult: ``moves`` is ``None`` when the board has no solution.
        """
        start_state = state or TripletState.fresh()
        moves: List[Point] = []
        nodes = 0
        start = time.perf_counter()
        _ensure_recursion_limit(board.removable_stones())

        def solve_recursively(st: TripletState) -> bool:
            nonlocal nodes
            # Solved; callers restore the board on the way out
            if board.is_solved():
                return st.count == 0
            for p in frontier(board, st):
                stone = board.stone_at(p)
                color, claim = st.removal_args(stone, board.wild_colors)
                removal = board.remove(p, color, claim_wild=claim)
                moves.append(p)
                nodes += 1
                if on_node is not None:
                    on_node(nodes, moves)
                if solve_recursively(st.after(stone)):
                    board.undo(removal)
                    return True
                board.undo(removal)
                moves.pop()
            return False

        found = solve_recursively(start_state)
        time_ms = int((time.perf_counter() - start) * 1000)
        result: Optional[List[Point]] = None
        if found:
            if (start_state.count + len(moves)) % 3 == 0:
                result = moves
            else:
                logger.error(
                    "rejecting solution with incomplete triplet",
                    extra={"moves": len(moves), "triplet": start_state.count},
                )
        logger.info(
            "solve finished",
            extra={
                "solvable": result is not None,
                "moves": len(moves) if result is not None else 0,
                "nodes": nodes,
                "time_ms": time_ms,
            },
        )
        return SolveResult(moves=result, nodes=nodes, time_ms=time_ms)


def solve(board: Board) -> Optional[List[Point]]:
    """Return a move sequence that clears ``board``, or ``None`` if none exists."""
    return SolveService().solve(board).moves


def _ensure_recursion_limit(depth: int) -> None:
    needed = depth + RECURSION_HEADROOM
    if sys.getrecursionlimit() < needed:
        logger.debug("raising recursion limit", extra={"limit": needed})
        sys.setrecursionlimit(needed)
