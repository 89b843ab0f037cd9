from __future__ import annotations

from typing import List, Optional

from .board import Board
from .point import Point
from .stones import AnyStone, OrdinaryStone, SurvivorStone, ToggleStone, WildStone


RESET = "\x1b[0m"
REVERSE = "\x1b[7m"

# Default ANSI 256 colors, indexed by color bit position
DEFAULT_PALETTE = [196, 46, 33, 226, 201, 51, 208, 129, 118, 39, 220, 163]
WILD_COLOR = 15
SURVIVOR_COLOR = 244
TOGGLE_COLOR = 250


def _fg(code: int) -> str:
    return f"\x1b[38;5;{code}m"


def stone_color(board: Board, stone: AnyStone) -> Optional[int]:
    """Return the ANSI 256 color used to draw ``stone``, or ``None`` for blank."""
    if isinstance(stone, OrdinaryStone):
        if stone.rep in board.palette:
            return board.palette[stone.rep]
        bit = stone.color.bit_length() - 1
        return DEFAULT_PALETTE[bit % len(DEFAULT_PALETTE)]
    if isinstance(stone, WildStone):
        return WILD_COLOR
    if isinstance(stone, SurvivorStone):
        return SURVIVOR_COLOR
    if isinstance(stone, ToggleStone):
        return TOGGLE_COLOR
    return None


def _cell(board: Board, point: Point, highlight: Optional[Point], color: bool) -> str:
    stone = board.stone_at(point)
    glyph = str(stone)
    lit = highlight is not None and highlight == point
    if not color:
        return f"[{glyph}]" if lit else f" {glyph} "
    code = stone_color(board, stone)
    if code is None:
        return f"{REVERSE} {glyph} {RESET}" if lit else f" {glyph} "
    if lit:
        return f"{REVERSE} {_fg(code)}{glyph} {RESET}"
    return f" {_fg(code)}{glyph}{RESET} "


def render(board: Board, highlight: Optional[Point] = None, *, color: bool = True) -> str:
    """Render ``board`` as a box-drawn frame.

    Args:
        board (Board): Board to draw; toggles are shown in their live phase.
        highlight (Optional[Point]): Cell to emphasise, typically the next
            move of a hint.
        color (bool): Emit ANSI color sequences; when ``False`` the
            highlighted cell is bracketed instead.

    Returns:
        str: Multi-line frame without a trailing newline.
    """
    lines: List[str] = [f"Turn {board.turn}"]
    wild = board.wild_glyphs()
    if wild:
        lines.append(f"Wild: {wild}")
    bar = "───"
    lines.append("┌" + "┬".join([bar] * board.width) + "┐")
    for y in range(board.height):
        cells = [_cell(board, Point(x, y), highlight, color) for x in range(board.width)]
        lines.append("│" + "│".join(cells) + "│")
        if y + 1 < board.height:
            lines.append("├" + "┼".join([bar] * board.width) + "┤")
    lines.append("└" + "┴".join([bar] * board.width) + "┘")
    if highlight is not None:
        lines.append(f"Remove {highlight.to_str()}")
    return "\n".join(lines)
