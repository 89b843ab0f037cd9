from __future__ import annotations

from dataclasses import dataclass
from typing import Union


# TSB / display glyphs of the special stones
EMPTY_GLYPH = "."
WILD_GLYPH = "*"
SURVIVOR_GLYPH = "#"
TOGGLE_OPEN_GLYPH = "O"
TOGGLE_CLOSED_GLYPH = "X"

# Colors are single bits of a 32-bit mask
MAX_COLORS = 32


@dataclass(frozen=True)
class NoStone:
    """The absence of a stone."""

    def removable(self) -> bool:
        return False

    def for_turn(self, turn: int) -> "NoStone":
        return self

    def __str__(self) -> str:
        return " "


@dataclass(frozen=True)
class OrdinaryStone:
    """An ordinary stone.

    Attributes:
        rep (str): Glyph that represents the stone and names its color.
        color (int): Bit mask with exactly one bit set identifying the color.
    """

    rep: str
    color: int

    def removable(self) -> bool:
        return True

    def for_turn(self, turn: int) -> "OrdinaryStone":
        return self

    def __str__(self) -> str:
        return self.rep


@dataclass(frozen=True)
class SurvivorStone:
    """A stone that cannot be matched; it vanishes once its row holds no
    removable stone."""

    def removable(self) -> bool:
        return False

    def for_turn(self, turn: int) -> "SurvivorStone":
        return self

    def __str__(self) -> str:
        return SURVIVOR_GLYPH


@dataclass(frozen=True)
class WildStone:
    """A stone that can stand in for any color still in the board's wild mask.

    The color space is a property of the board, shared by every wild stone;
    committing one wild stone to a color removes that color for the others.
    """

    def removable(self) -> bool:
        return True

    def for_turn(self, turn: int) -> "WildStone":
        return self

    def __str__(self) -> str:
        return WILD_GLYPH


@dataclass(frozen=True)
class ToggleStone:
    """A stone that alternately obstructs and permits access to its column.

    Attributes:
        phase (int): ``0`` when open, ``1`` when closed. The stored phase is
            the phase at turn zero; use :meth:`for_turn` for the live state.
    """

    phase: int

    def removable(self) -> bool:
        return False

    def for_turn(self, turn: int) -> "ToggleStone":
        return ToggleStone((self.phase ^ turn) & 1)

    def is_open(self) -> bool:
        return self.phase & 1 == 0

    def __str__(self) -> str:
        return TOGGLE_OPEN_GLYPH if self.is_open() else TOGGLE_CLOSED_GLYPH


AnyStone = Union[NoStone, OrdinaryStone, SurvivorStone, WildStone, ToggleStone]

NO_STONE = NoStone()
SURVIVOR = SurvivorStone()
WILD = WildStone()


def tsb_glyph(stone: AnyStone) -> str:
    """Return the TSB grid character for ``stone`` (empty cells become ``.``)."""
    if isinstance(stone, NoStone):
        return EMPTY_GLYPH
    return str(stone)


def popcount(mask: int) -> int:
    return bin(mask).count("1")
