from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """Board coordinate.

    Attributes:
        x (int): Column, counted from the left.
        y (int): Row, counted from the top.
    """

    x: int
    y: int

    def to_str(self) -> str:
        """Serialize the point as ``"x,y"``.

        Returns:
            str: Point encoded like ``"2,5"``.
        """
        return f"{self.x},{self.y}"


def parse_point(text: str) -> Point:
    """Parse a point written as ``"x,y"`` (spaces allowed around the parts).

    Args:
        text (str): Point text such as ``"2,5"``.

    Returns:
        Point: Parsed point.

    Raises:
        ValueError: If the text is not two comma-separated non-negative
            integers.
    """
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"invalid point: {text!r}")
    try:
        x, y = int(parts[0]), int(parts[1])
    except ValueError as e:
        raise ValueError(f"invalid point: {text!r}") from e
    if x < 0 or y < 0:
        raise ValueError(f"invalid point: {text!r}")
    return Point(x, y)
