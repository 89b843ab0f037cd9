from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ..engine.board import Board
from ..engine.point import Point
from ..engine.stones import (
    AnyStone,
    NoStone,
    OrdinaryStone,
    SurvivorStone,
    ToggleStone,
    WildStone,
)


# Active color filter meaning "any color"
WILD_COLOR = 0


@dataclass(frozen=True)
class TripletState:
    """Constraints on the next move, derived from the current triplet.

    Attributes:
        color (int): Color the next stone must have, ``0`` for any.
        allow_wild (bool): Whether a wild stone may be played next; a triplet
            holds at most one.
        pending_wild (bool): A wild stone opened the triplet and has not yet
            committed to a color; the next ordinary stone claims its own color
            from the wild mask when the mask holds it.
        count (int): Moves already made in the triplet, ``0`` to ``2``.
    """

    color: int = WILD_COLOR
    allow_wild: bool = True
    pending_wild: bool = False
    count: int = 0

    @classmethod
    def fresh(cls) -> "TripletState":
        return cls()

    def after(self, stone: AnyStone) -> "TripletState":
        """Return the state that follows removing ``stone`` under this state."""
        if self.count + 1 == 3:
            return TripletState.fresh()
        if isinstance(stone, OrdinaryStone):
            return TripletState(stone.color, self.allow_wild, False, self.count + 1)
        if isinstance(stone, WildStone):
            return TripletState(self.color, False, self.color == WILD_COLOR, self.count + 1)
        raise ValueError(f"{type(stone).__name__} cannot be played")

    def removal_args(self, stone: AnyStone, wild_colors: int) -> Tuple[int, bool]:
        """Return the ``(color, claim_wild)`` arguments for :meth:`Board.remove`."""
        claim = (
            self.pending_wild
            and isinstance(stone, OrdinaryStone)
            and bool(wild_colors & stone.color)
        )
        return self.color, claim


def frontier(board: Board, state: TripletState) -> List[Point]:
    """Compute the stones that may be removed next.

    Each column is scanned from the bottom row upwards; the first stone that is
    not empty, a survivor, or an open toggle ends the scan of that column,
    whether or not it passes the color and wild filters.

    Args:
        board (Board): Board to inspect.
        state (TripletState): Active color filter and wild permissiveness.

    Returns:
        List[Point]: At most one point per column, left to right.
    """
    points: List[Point] = []
    wild_colors = board.wild_colors
    for x in range(board.width):
        for y in range(board.height - 1, -1, -1):
            stone = board.stone_at(Point(x, y))
            if isinstance(stone, (NoStone, SurvivorStone)):
                continue
            if isinstance(stone, ToggleStone):
                if stone.is_open():
                    continue
                break
            if isinstance(stone, OrdinaryStone):
                if state.color == WILD_COLOR or state.color == stone.color:
                    points.append(Point(x, y))
            elif isinstance(stone, WildStone):
                if state.allow_wild and (
                    state.color == WILD_COLOR or state.color & wild_colors
                ):
                    points.append(Point(x, y))
            break
    return points
