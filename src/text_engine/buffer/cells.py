"""Index-addressed doubly linked character storage.

Characters live in ``Cell`` records held by a plain list. Links are list
indices rather than object references, so a removed cell can be recycled
without any live link pointing at it. Two cells are reserved: ``HEAD`` sits
before the first character and ``TAIL`` after the last, which keeps insertion
and removal free of end-of-sequence special cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

HEAD = 0
TAIL = 1


@dataclass(slots=True)
class Cell:
    char: str
    prev: Optional[int] = None
    next: Optional[int] = None
    live: bool = True


class CellChain:
    """Arena of cells forming one sequence between ``HEAD`` and ``TAIL``."""

    def __init__(self) -> None:
        self._cells: List[Cell] = []
        self._free: List[int] = []
        self.length = 0
        self.clear()

    def clear(self) -> None:
        """Drop every real cell and relink the sentinels."""

        self._cells = [Cell("", None, TAIL), Cell("", HEAD, None)]
        self._free = []
        self.length = 0

    def char(self, index: int) -> str:
        return self._cells[index].char

    def next_of(self, index: int) -> int:
        link = self._cells[index].next
        if link is None:
            raise IndexError("TAIL has no successor")
        return link

    def prev_of(self, index: int) -> int:
        link = self._cells[index].prev
        if link is None:
            raise IndexError("HEAD has no predecessor")
        return link

    def is_live(self, index: int) -> bool:
        return 0 <= index < len(self._cells) and self._cells[index].live

    def link_after(self, anchor: int, char: str) -> int:
        """Create a cell holding ``char`` right after ``anchor``; return its index."""

        if anchor == TAIL:
            raise IndexError("cannot link after TAIL")
        successor = self.next_of(anchor)
        if self._free:
            index = self._free.pop()
            cell = self._cells[index]
            cell.char = char
            cell.prev = anchor
            cell.next = successor
            cell.live = True
        else:
            index = len(self._cells)
            self._cells.append(Cell(char, anchor, successor))
        self._cells[anchor].next = index
        self._cells[successor].prev = index
        self.length += 1
        return index

    def unlink(self, index: int) -> str:
        """Remove the real cell at ``index`` and return its character."""

        if index in (HEAD, TAIL):
            raise IndexError("sentinel cells cannot be removed")
        cell = self._cells[index]
        if not cell.live:
            raise IndexError(f"cell {index} was already removed")
        before = self.prev_of(index)
        after = self.next_of(index)
        self._cells[before].next = after
        self._cells[after].prev = before
        cell.prev = None
        cell.next = None
        cell.live = False
        self._free.append(index)
        self.length -= 1
        return cell.char

    def cell_at(self, offset: int) -> int:
        """Index of the cell left of insertion point ``offset`` (0 gives ``HEAD``)."""

        if offset < 0 or offset > self.length:
            raise IndexError(f"offset {offset} outside 0..{self.length}")
        index = HEAD
        for _ in range(offset):
            index = self.next_of(index)
        return index

    def iter_cells(self, start: int = HEAD) -> Iterator[int]:
        """Yield real cell indices following ``start``, in document order."""

        index = self.next_of(start)
        while index != TAIL:
            yield index
            index = self.next_of(index)

    def text(self) -> str:
        return "".join(self._cells[index].char for index in self.iter_cells())

    def __len__(self) -> int:
        return self.length


__all__ = ["HEAD", "TAIL", "Cell", "CellChain"]
