"""Cursor state tied to a cell chain."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .cells import HEAD

Cursor = Tuple[int, int]  # (row, column)


@dataclass(slots=True)
class CursorState:
    """Cell index left of the insertion point plus cached positions.

    ``cell`` is ``HEAD`` when the insertion point precedes every character,
    and ``offset`` counts the characters before the insertion point.
    ``row``/``col`` are maintained by the buffer; they are derived data and
    must be refreshed whenever a newline is added, removed or crossed.
    """

    cell: int = HEAD
    row: int = 0
    col: int = 0
    offset: int = 0

    @property
    def position(self) -> Cursor:
        return (self.row, self.col)

    def place(self, cell: int, row: int, col: int, offset: int) -> None:
        self.cell = cell
        self.row = row
        self.col = col
        self.offset = offset

    def reset(self) -> None:
        self.place(HEAD, 0, 0, 0)


class Direction(str, Enum):
    """Cursor motions understood by ``TextBuffer.move_cursor``."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
