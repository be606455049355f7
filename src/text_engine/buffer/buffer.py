"""The editable character sequence and its cursor."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .cells import HEAD, TAIL, CellChain
from .state import Cursor, CursorState, Direction
from .sync import BufferMirror, BufferValidationError, NothingToDeleteError
from .validation import ensure_char, ensure_query, ensure_range


class TextBuffer:
    """Mutable text with a movable insertion point.

    The buffer never records history; callers that want undo capture an edit
    descriptor around each mutation (see ``text_engine.buffer.undo``).
    """

    def __init__(self, *, name: str = "default") -> None:
        self.name = name
        self.chain = CellChain()
        self.cursor = CursorState()
        self.version = 0

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "TextBuffer":
        buffer = cls(name=name)
        buffer.load_text(text)
        return buffer

    @property
    def length(self) -> int:
        return self.chain.length

    @property
    def cursor_row(self) -> int:
        return self.cursor.row

    @property
    def cursor_col(self) -> int:
        return self.cursor.col

    @property
    def cursor_position(self) -> Cursor:
        return self.cursor.position

    @property
    def cursor_offset(self) -> int:
        """Characters before the insertion point."""

        return self.cursor.offset

    def text(self) -> str:
        return self.chain.text()

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.text(),
            cursor=self.cursor.position,
            offset=self.cursor_offset,
            attributes=dict(attributes or {}),
        )

    # -- mutation -----------------------------------------------------------

    def insert_at(self, char: str) -> int:
        """Link ``char`` after the cursor and step the cursor onto it."""

        ensure_char(char)
        cell = self.chain.link_after(self.cursor.cell, char)
        offset = self.cursor.offset + 1
        if char == "\n":
            self.cursor.place(cell, self.cursor.row + 1, 0, offset)
        else:
            self.cursor.place(cell, self.cursor.row, self.cursor.col + 1, offset)
        self.version += 1
        return cell

    def insert_text(self, text: str) -> None:
        for char in text:
            self.insert_at(char)

    def delete_after_cursor(self) -> str:
        """Remove and return the character right of the cursor."""

        target = self.chain.next_of(self.cursor.cell)
        if target == TAIL:
            raise NothingToDeleteError(
                "Nothing to delete at cursor position", length=self.length
            )
        char = self.chain.unlink(target)
        self.version += 1
        return char

    def replace_span(self, position: int, length: int, text: str) -> str:
        """Swap ``length`` characters at ``position`` for ``text``.

        The cursor ends up just after the inserted text. Returns what was
        removed.
        """

        if position < 0 or length < 0 or position + length > self.length:
            raise BufferValidationError(
                f"Span {position}+{length} outside buffer of {self.length}",
                span=(position, position + length),
                length=self.length,
            )
        self.set_cursor_offset(position)
        removed = [self.delete_after_cursor() for _ in range(length)]
        self.insert_text(text)
        return "".join(removed)

    def load_text(self, text: str) -> None:
        """Replace all content; the cursor lands after the last character."""

        self.chain.clear()
        self.cursor.reset()
        self.insert_text(text)
        self.version += 1

    def clear(self) -> None:
        self.load_text("")

    # -- cursor -------------------------------------------------------------

    def move_cursor(self, direction: Direction | str) -> bool:
        """Step the cursor; ``False`` means it was already at the boundary."""

        step = {
            Direction.LEFT: self._move_left,
            Direction.RIGHT: self._move_right,
            Direction.UP: self._move_up,
            Direction.DOWN: self._move_down,
        }[Direction(direction)]
        return step()

    def set_cursor_offset(self, offset: int) -> None:
        cell = self.chain.cell_at(offset)
        row, col = self._locate(cell)
        self.cursor.place(cell, row, col, offset)

    def _move_left(self) -> bool:
        current = self.cursor.cell
        if current == HEAD:
            return False
        previous = self.chain.prev_of(current)
        offset = self.cursor.offset - 1
        if self.chain.char(current) == "\n":
            col = self._column_of(previous)
            self.cursor.place(previous, self.cursor.row - 1, col, offset)
        else:
            self.cursor.place(previous, self.cursor.row, self.cursor.col - 1, offset)
        return True

    def _move_right(self) -> bool:
        following = self.chain.next_of(self.cursor.cell)
        if following == TAIL:
            return False
        offset = self.cursor.offset + 1
        if self.chain.char(following) == "\n":
            self.cursor.place(following, self.cursor.row + 1, 0, offset)
        else:
            self.cursor.place(following, self.cursor.row, self.cursor.col + 1, offset)
        return True

    def _move_up(self) -> bool:
        if self.cursor.row == 0:
            return False
        line_start, first = self._line_start(self.cursor.cell)
        target, second = self._line_start(self.chain.prev_of(line_start))
        offset = self.cursor.offset - first - 1 - second
        self.cursor.place(target, self.cursor.row - 1, 0, offset)
        return True

    def _move_down(self) -> bool:
        index = self.chain.next_of(self.cursor.cell)
        steps = 1
        while index != TAIL and self.chain.char(index) != "\n":
            index = self.chain.next_of(index)
            steps += 1
        if index == TAIL:
            return False
        self.cursor.place(index, self.cursor.row + 1, 0, self.cursor.offset + steps)
        return True

    def _line_start(self, index: int) -> Tuple[int, int]:
        """Newline (or ``HEAD``) opening the line of ``index``, and steps taken."""

        steps = 0
        while index != HEAD and self.chain.char(index) != "\n":
            index = self.chain.prev_of(index)
            steps += 1
        return index, steps

    def _column_of(self, index: int) -> int:
        return self._line_start(index)[1]

    def _locate(self, cell: int) -> Tuple[int, int]:
        row = 0
        if cell != HEAD:
            for index in self.chain.iter_cells():
                if self.chain.char(index) == "\n":
                    row += 1
                if index == cell:
                    break
        return row, self._column_of(cell)

    # -- queries ------------------------------------------------------------

    def extract_range(self, start: int, end: int) -> str:
        """Characters at offsets ``start`` through ``end`` inclusive."""

        ensure_range(self.length, start, end)
        collected: List[str] = []
        for offset, index in enumerate(self.chain.iter_cells()):
            if offset > end:
                break
            if offset >= start:
                collected.append(self.chain.char(index))
        return "".join(collected)

    def search_all(self, word: str) -> List[int]:
        """Every offset where ``word`` starts, ignoring case; overlaps included."""

        needle = _fold(ensure_query(word))
        haystack = _fold(self.text())
        width = len(needle)
        return [
            offset
            for offset in range(len(haystack) - width + 1)
            if haystack[offset : offset + width] == needle
        ]

    def find_and_replace(self, find: str, replace: str) -> int:
        """Rebuild the text with every ``find`` swapped for ``replace``."""

        rebuilt, count = replace_all(self.text(), ensure_query(find), replace)
        if count:
            self.load_text(rebuilt)
        return count

    def char_count(self) -> int:
        return self.length

    def word_count(self) -> int:
        words = 0
        in_word = False
        for index in self.chain.iter_cells():
            if self.chain.char(index).isalnum():
                if not in_word:
                    words += 1
                    in_word = True
            else:
                in_word = False
        return words

    def line_count(self) -> int:
        return 1 + sum(
            1 for index in self.chain.iter_cells() if self.chain.char(index) == "\n"
        )


def replace_all(text: str, find: str, replace: str) -> Tuple[str, int]:
    """Greedy, left-to-right, case-insensitive, non-overlapping substitution.

    Matches are located in ``text`` only, never in the output being built.
    """

    folded = _fold(text)
    needle = _fold(find)
    width = len(needle)
    pieces: List[str] = []
    count = 0
    index = 0
    while index < len(text):
        if folded.startswith(needle, index):
            pieces.append(replace)
            index += width
            count += 1
        else:
            pieces.append(text[index])
            index += 1
    return "".join(pieces), count


def _fold(text: str) -> str:
    # Per-character lowering keeps offsets aligned with the original text.
    return "".join(_fold_char(char) for char in text)


def _fold_char(char: str) -> str:
    lowered = char.lower()
    return lowered if len(lowered) == 1 else char


__all__ = ["TextBuffer", "replace_all"]
