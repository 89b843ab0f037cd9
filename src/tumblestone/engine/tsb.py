"""TSB: the text format of Tumblestone boards.

A legend of ``key = value`` properties, a ``---`` separator, then the grid, one
row per line::

    width = 3
    wild = r
    lock = no
    color.r = 196
    ---
    r g .
    * g r
    r g r

Grid glyphs: ``.`` empty, ``*`` wild, ``#`` survivor, ``O`` open toggle,
``X`` closed toggle; any other letter or digit is an ordinary stone whose
glyph names its color. Whitespace inside a row is ignored.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .board import Board
from .stones import (
    EMPTY_GLYPH,
    MAX_COLORS,
    NO_STONE,
    SURVIVOR,
    SURVIVOR_GLYPH,
    TOGGLE_CLOSED_GLYPH,
    TOGGLE_OPEN_GLYPH,
    WILD,
    WILD_GLYPH,
    AnyStone,
    OrdinaryStone,
    ToggleStone,
    WildStone,
    popcount,
    tsb_glyph,
)


SEPARATOR = "---"
SPECIAL_GLYPHS = {EMPTY_GLYPH, WILD_GLYPH, SURVIVOR_GLYPH, TOGGLE_OPEN_GLYPH, TOGGLE_CLOSED_GLYPH}
TRUE_WORDS = {"yes", "true", "on", "1"}
FALSE_WORDS = {"no", "false", "off", "0"}


class ParseError(ValueError):
    """Base class of TSB parse failures.

    Attributes:
        line (Optional[int]): One-based line number of the offending input,
            when known.
    """

    kind = "parse_error"

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class LegendSyntaxError(ParseError):
    kind = "legend_syntax"


class PropertyValueError(ParseError):
    kind = "property_value"


class GridError(ParseError):
    kind = "grid"


class WildCountError(ParseError):
    kind = "wild_count"


class ColorLimitError(ParseError):
    kind = "color_limit"


def is_color_glyph(ch: str) -> bool:
    return len(ch) == 1 and ch.isalnum() and ch not in SPECIAL_GLYPHS


def _parse_bool(value: str, line: int) -> bool:
    word = value.lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    raise PropertyValueError(f"invalid boolean: {value!r}", line)


def _parse_legend(lines: List[str]) -> Dict[str, tuple]:
    # key -> (value, line number)
    props: Dict[str, tuple] = {}
    for number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        if "=" not in line:
            raise LegendSyntaxError(f"expected 'key = value', got {line!r}", number)
        key, value = (part.strip() for part in line.split("=", 1))
        if not key:
            raise LegendSyntaxError("missing property name", number)
        if key in props:
            raise LegendSyntaxError(f"duplicate property {key!r}", number)
        props[key] = (value, number)
    return props


def parse_tsb(text: str) -> Board:
    """Parse TSB text into a validated :class:`Board`.

    Args:
        text (str): Legend, separator and grid.

    Returns:
        Board: Board at turn zero.

    Raises:
        LegendSyntaxError: If a legend line is not ``key = value``, a key is
            repeated, or the ``---`` separator is missing.
        PropertyValueError: If a property is unknown, missing or invalid.
        GridError: If the grid is empty, a row has the wrong length, or a
            glyph is not recognised.
        WildCountError: If the number of wild stones differs from the number
            of declared wild colors.
        ColorLimitError: If the board uses more than 32 colors.
    """
    lines = text.splitlines()
    try:
        sep = next(i for i, line in enumerate(lines) if line.strip() == SEPARATOR)
    except StopIteration:
        raise LegendSyntaxError(f"missing {SEPARATOR!r} between legend and grid") from None
    props = _parse_legend(lines[:sep])

    width: Optional[int] = None
    wild = ""
    lock = False
    palette: Dict[str, int] = {}
    for key, (value, number) in props.items():
        if key == "width":
            try:
                width = int(value)
            except ValueError as e:
                raise PropertyValueError(f"invalid width: {value!r}", number) from e
            if width <= 0:
                raise PropertyValueError("width must be positive", number)
        elif key == "wild":
            wild = "".join(value.split())
            for ch in wild:
                if not is_color_glyph(ch):
                    raise PropertyValueError(f"invalid wild color: {ch!r}", number)
            if len(set(wild)) != len(wild):
                raise PropertyValueError("wild colors must be distinct", number)
        elif key == "lock":
            lock = _parse_bool(value, number)
        elif key.startswith("color."):
            glyph = key[len("color."):]
            if not is_color_glyph(glyph):
                raise PropertyValueError(f"invalid color glyph: {glyph!r}", number)
            try:
                code = int(value)
            except ValueError as e:
                raise PropertyValueError(f"invalid color code: {value!r}", number) from e
            if not 0 <= code <= 255:
                raise PropertyValueError("color code must be 0..255", number)
            palette[glyph] = code
        else:
            raise PropertyValueError(f"unknown property {key!r}", number)
    if width is None:
        raise PropertyValueError("missing required property 'width'")

    colors: Dict[str, int] = {}

    def color_of(glyph: str, number: int) -> int:
        if glyph not in colors:
            if len(colors) >= MAX_COLORS:
                raise ColorLimitError(f"more than {MAX_COLORS} colors", number)
            colors[glyph] = 1 << len(colors)
        return colors[glyph]

    grid: List[AnyStone] = []
    height = 0
    for number, raw in enumerate(lines[sep + 1:], start=sep + 2):
        row = "".join(raw.split())
        if not row:
            continue
        if len(row) != width:
            raise GridError(f"row has {len(row)} tiles, expected {width}", number)
        for ch in row:
            grid.append(_stone_for(ch, number, color_of))
        height += 1
    if height == 0:
        raise GridError("grid has no rows")

    wild_colors = 0
    for ch in wild:
        wild_colors |= color_of(ch, props["wild"][1])
    wilds = sum(1 for s in grid if isinstance(s, WildStone))
    if wilds != popcount(wild_colors):
        raise WildCountError(
            f"{wilds} wild stone(s) but {popcount(wild_colors)} wild color(s) declared"
        )

    return Board(
        width=width,
        height=height,
        grid=grid,
        wild_colors=wild_colors,
        lock=lock,
        colors=colors,
        palette=palette,
    )


def _stone_for(ch: str, number: int, color_of) -> AnyStone:
    if ch == EMPTY_GLYPH:
        return NO_STONE
    if ch == WILD_GLYPH:
        return WILD
    if ch == SURVIVOR_GLYPH:
        return SURVIVOR
    if ch == TOGGLE_OPEN_GLYPH:
        return ToggleStone(0)
    if ch == TOGGLE_CLOSED_GLYPH:
        return ToggleStone(1)
    if is_color_glyph(ch):
        return OrdinaryStone(ch, color_of(ch, number))
    raise GridError(f"unknown glyph {ch!r}", number)


def format_tsb(board: Board) -> str:
    """Serialize the current state of ``board`` as TSB text.

    Toggle stones are written in their live phase and only the wild colors
    still claimable are declared, so the text parses back into a turn-zero
    board that plays like the current one. Colors left in the mask by a wild
    stone that was already removed are dropped, keeping one declared color
    per wild stone on the board.
    """
    out: List[str] = [f"width = {board.width}"]
    wilds = sum(1 for s in board.grid if isinstance(s, WildStone))
    wild = board.wild_glyphs()[:wilds]
    if wild:
        out.append(f"wild = {wild}")
    out.append(f"lock = {'yes' if board.lock else 'no'}")
    for glyph, code in board.palette.items():
        out.append(f"color.{glyph} = {code}")
    out.append(SEPARATOR)
    out.extend(grid_rows(board))
    return "\n".join(out) + "\n"


def grid_rows(board: Board) -> List[str]:
    """Return the live grid as TSB rows, top row first."""
    rows: List[str] = []
    for y in range(board.height):
        row = board.grid[y * board.width:(y + 1) * board.width]
        rows.append(" ".join(tsb_glyph(s.for_turn(board.turn)) for s in row))
    return rows
