from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .point import Point
from .stones import (
    NO_STONE,
    SURVIVOR,
    AnyStone,
    OrdinaryStone,
    SurvivorStone,
    WildStone,
    popcount,
)


class InvariantViolation(RuntimeError):
    """Raised when a caller breaks the board's mutation contract.

    These are programming faults (a wrong frontier, undo out of order), never
    data errors, and are not meant to be caught.
    """


@dataclass(frozen=True)
class Removal:
    """Undo record for a single :meth:`Board.remove`.

    Attributes:
        point (Point): Where the stone was removed.
        stone (AnyStone): The stone as it was stored before removal.
        color (int): Color asserted by the caller, ``0`` for none.
        cleared_wild (int): Bit cleared from the wild mask, ``0`` for none.
        survivors (Tuple[int, ...]): Grid indices of survivor stones cleared
            by the row cascade.
        turn (int): Board turn right after the removal; undo requires the
            board to still be at this turn.
    """

    point: Point
    stone: AnyStone
    color: int
    cleared_wild: int
    survivors: Tuple[int, ...]
    turn: int


@dataclass
class Board:
    """Board state of a Tumblestone puzzle.

    Notes:
    - Cells are stored row-major in ``grid``; ``(0, 0)`` is the top-left cell
      and the bottom row is the playable end of every column.
    - Mutation happens in place through :meth:`remove` / :meth:`undo`; the
      search never copies the board.
    """

    width: int
    height: int
    grid: List[AnyStone]
    # bitwise OR of the colors still claimable by wild stones
    wild_colors: int = 0
    # color lock: stored and reported, not enforced by move legality
    lock: bool = False
    # color glyph -> color bit
    colors: Dict[str, int] = field(default_factory=dict)
    # color glyph -> ANSI 256 color used when rendering
    palette: Dict[str, int] = field(default_factory=dict)
    turn: int = 0
    _removable: int = field(default=-1, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("board dimensions must be positive")
        if len(self.grid) != self.width * self.height:
            raise ValueError("grid size does not match width x height")
        wilds = sum(1 for s in self.grid if isinstance(s, WildStone))
        if popcount(self.wild_colors) != wilds:
            raise ValueError(
                f"{wilds} wild stone(s) but {popcount(self.wild_colors)} wild color(s)"
            )
        if self._removable < 0:
            self._removable = self._count_removable()

    @classmethod
    def from_tsb(cls, text: str) -> "Board":
        """Create a board from TSB text (see :mod:`tumblestone.engine.tsb`).

        Raises:
            ParseError: If the text is malformed or inconsistent.
        """
        from .tsb import parse_tsb

        return parse_tsb(text)

    def to_tsb(self) -> str:
        from .tsb import format_tsb

        return format_tsb(self)

    # --- Queries ---
    def index(self, point: Point) -> int:
        if not (0 <= point.x < self.width and 0 <= point.y < self.height):
            raise InvariantViolation(f"point {point.to_str()} is off the board")
        return point.y * self.width + point.x

    def raw_stone_at(self, point: Point) -> AnyStone:
        return self.grid[self.index(point)]

    def stone_at(self, point: Point) -> AnyStone:
        """Return the stone at ``point`` as it behaves on the current turn."""
        return self.grid[self.index(point)].for_turn(self.turn)

    def removable_stones(self) -> int:
        return self._removable

    def is_solved(self) -> bool:
        return self._removable == 0

    def wild_glyphs(self) -> str:
        """Return the glyphs of the colors wild stones may still claim."""
        return "".join(g for g, bit in self.colors.items() if self.wild_colors & bit)

    def snapshot(self) -> Tuple:
        """Return every mutable part of the board, for structural comparison."""
        return (tuple(self.grid), self.turn, self.wild_colors, self._removable)

    def _count_removable(self) -> int:
        return sum(1 for s in self.grid if s.for_turn(self.turn).removable())

    # --- Mutation ---
    def remove(self, point: Point, color: int = 0, *, claim_wild: bool = False) -> Removal:
        """Remove the stone at ``point`` in place and return its undo record.

        Args:
            point (Point): Cell holding a removable stone.
            color (int): Color the caller plays the stone as; ``0`` asserts no
                color. A wild stone played as a color claims that color from
                the wild mask.
            claim_wild (bool): For an ordinary stone, also claim its color from
                the wild mask on behalf of a wild stone that opened the
                current triplet without committing to a color.

        Returns:
            Removal: Record to pass to :meth:`undo`.

        Raises:
            InvariantViolation: If the stone is not removable or the color
                assertion does not hold.
        """
        idx = self.index(point)
        stone = self.grid[idx]
        if not stone.for_turn(self.turn).removable():
            raise InvariantViolation(f"stone at {point.to_str()} is not removable")

        cleared = 0
        if isinstance(stone, OrdinaryStone):
            if color != 0 and color != stone.color:
                raise InvariantViolation(
                    f"stone at {point.to_str()} does not have color {color:#x}"
                )
            if claim_wild:
                if not self.wild_colors & stone.color:
                    raise InvariantViolation(f"color {stone.color:#x} is not a wild color")
                cleared = stone.color
        elif isinstance(stone, WildStone):
            if claim_wild:
                raise InvariantViolation("a wild stone cannot claim for another wild stone")
            if color != 0:
                if popcount(color) != 1 or not self.wild_colors & color:
                    raise InvariantViolation(f"color {color:#x} is not a wild color")
                cleared = color

        self.wild_colors &= ~cleared
        self.grid[idx] = NO_STONE
        self._removable -= 1
        self.turn += 1
        survivors = self._cascade(point.y)
        return Removal(point, stone, color, cleared, survivors, self.turn)

    def undo(self, removal: Removal) -> None:
        """Reverse ``removal``, which must be the most recent one applied."""
        if removal.turn != self.turn:
            raise InvariantViolation(
                f"undo out of order: record is for turn {removal.turn}, board is at {self.turn}"
            )
        for idx in removal.survivors:
            self.grid[idx] = SURVIVOR
        self.grid[self.index(removal.point)] = removal.stone
        self.wild_colors |= removal.cleared_wild
        self._removable += 1
        self.turn -= 1

    def force_remove(self, point: Point) -> None:
        """Remove the stone at ``point`` irreversibly, without color bookkeeping.

        Used to walk through a solution that was already found; never call it
        while a search is running.
        """
        idx = self.index(point)
        if not self.grid[idx].for_turn(self.turn).removable():
            raise InvariantViolation(f"stone at {point.to_str()} is not removable")
        self.grid[idx] = NO_STONE
        self._removable -= 1
        self.turn += 1
        self._cascade(point.y)

    def _cascade(self, row: int) -> Tuple[int, ...]:
        # Survivors go once nothing removable remains in their row
        start = row * self.width
        cells = range(start, start + self.width)
        if any(self.grid[i].for_turn(self.turn).removable() for i in cells):
            return ()
        cleared = tuple(i for i in cells if isinstance(self.grid[i], SurvivorStone))
        for i in cleared:
            self.grid[i] = NO_STONE
        return cleared
