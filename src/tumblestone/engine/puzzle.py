from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .board import Board, Removal
from .point import Point
from ..search.frontier import TripletState, frontier
from ..search.service import SolveResult, SolveService


@dataclass
class Puzzle:
    """Puzzle wrapper around a board with helper operations.

    Responsibility: track played moves and the triplet in progress, expose
    legal moves, play and undo moves, and step through a computed plan.
    """

    board: Board
    history: List[Removal] = field(default_factory=list)
    states: List[TripletState] = field(default_factory=lambda: [TripletState.fresh()])
    plan: Optional[List[Point]] = None
    # len(history) when the plan was computed
    plan_base: int = 0

    @classmethod
    def from_tsb(cls, text: str) -> "Puzzle":
        return cls(board=Board.from_tsb(text))

    def to_tsb(self) -> str:
        return self.board.to_tsb()

    @property
    def state(self) -> TripletState:
        return self.states[-1]

    def legal_moves(self) -> List[Point]:
        return frontier(self.board, self.state)

    def play(self, point: Point) -> None:
        if point not in self.legal_moves():
            raise ValueError("illegal move")
        stone = self.board.stone_at(point)
        color, claim = self.state.removal_args(stone, self.board.wild_colors)
        self.history.append(self.board.remove(point, color, claim_wild=claim))
        self.states.append(self.state.after(stone))

    def undo(self) -> None:
        if not self.history:
            raise ValueError("no moves to undo")
        self.board.undo(self.history.pop())
        self.states.pop()

    def solve(self, service: Optional[SolveService] = None) -> SolveResult:
        res = (service or SolveService()).solve(self.board, self.state)
        self.plan = res.moves
        self.plan_base = len(self.history)
        return res

    def next_planned(self) -> Optional[Point]:
        """Return the next move of the stored plan, or ``None`` if the plan is
        missing, finished, or no longer matches the moves played since."""
        if self.plan is None or len(self.history) < self.plan_base:
            return None
        done = [r.point for r in self.history[self.plan_base:]]
        if done != self.plan[: len(done)] or len(done) >= len(self.plan):
            return None
        return self.plan[len(done)]

    def step(self) -> Point:
        nxt = self.next_planned()
        if nxt is None:
            raise ValueError("no plan to follow")
        self.play(nxt)
        return nxt

    def solved(self) -> bool:
        return self.board.is_solved() and self.state.count == 0

    def move_history(self) -> List[str]:
        return [r.point.to_str() for r in self.history]
