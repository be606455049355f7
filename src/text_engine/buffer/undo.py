"""Edit descriptors and the bounded stacks that drive undo/redo."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from text_engine.config import OverflowPolicy

from .buffer import TextBuffer


@dataclass(frozen=True, slots=True)
class InsertEdit:
    """``char`` was inserted so that it now sits at offset ``position``."""

    char: str
    position: int
    label: str = "insert_char"

    def apply(self, buffer: TextBuffer) -> None:
        buffer.set_cursor_offset(self.position)
        buffer.insert_at(self.char)

    def revert(self, buffer: TextBuffer) -> None:
        buffer.set_cursor_offset(self.position)
        buffer.delete_after_cursor()


@dataclass(frozen=True, slots=True)
class DeleteEdit:
    """``char`` was removed from offset ``position``; the cursor stayed put."""

    char: str
    position: int
    label: str = "delete_char"

    def apply(self, buffer: TextBuffer) -> None:
        buffer.set_cursor_offset(self.position)
        buffer.delete_after_cursor()

    def revert(self, buffer: TextBuffer) -> None:
        buffer.set_cursor_offset(self.position)
        buffer.insert_at(self.char)
        buffer.set_cursor_offset(self.position)


@dataclass(frozen=True, slots=True)
class BlockEdit:
    """One compound change: ``removed`` at ``position`` became ``inserted``.

    Paste, cut, line edits and find-and-replace each collapse into a single
    block so one undo reverses the whole operation.
    """

    position: int
    removed: str
    inserted: str
    label: str = "block"
    cursor_before: int = 0

    @property
    def length(self) -> int:
        return len(self.inserted)

    def apply(self, buffer: TextBuffer) -> None:
        buffer.replace_span(self.position, len(self.removed), self.inserted)

    def revert(self, buffer: TextBuffer) -> None:
        buffer.replace_span(self.position, len(self.inserted), self.removed)
        buffer.set_cursor_offset(self.cursor_before)


EditDescriptor = Union[InsertEdit, DeleteEdit, BlockEdit]


class HistoryEmptyError(RuntimeError):
    """Raised when popping from an empty history stack."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Nothing to {name}")
        self.stack = name


class HistoryOverflowError(RuntimeError):
    """Raised when a full stack under the ``reject`` policy refuses an entry."""

    def __init__(
        self, name: str, capacity: int, entry: Optional[EditDescriptor] = None
    ) -> None:
        super().__init__(f"{name} history is full ({capacity} entries)")
        self.stack = name
        self.capacity = capacity
        self.entry = entry


class HistoryStack:
    """Fixed-capacity LIFO of edit descriptors."""

    def __init__(
        self,
        name: str,
        *,
        capacity: int = 100,
        overflow: OverflowPolicy = "drop_oldest",
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.name = name
        self.capacity = capacity
        self.overflow = overflow
        self._entries: List[EditDescriptor] = []

    def push(self, entry: EditDescriptor) -> Optional[EditDescriptor]:
        """Push ``entry``; returns the evicted entry under ``drop_oldest``."""

        evicted: Optional[EditDescriptor] = None
        if self.is_full():
            if self.overflow == "reject":
                raise HistoryOverflowError(self.name, self.capacity, entry)
            evicted = self._entries.pop(0)
        self._entries.append(entry)
        return evicted

    def pop(self) -> EditDescriptor:
        if not self._entries:
            raise HistoryEmptyError(self.name)
        return self._entries.pop()

    def peek(self) -> Optional[EditDescriptor]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def is_full(self) -> bool:
        return len(self._entries) >= self.capacity

    def entries(self) -> tuple[EditDescriptor, ...]:
        """Bottom-to-top copy of the stack."""

        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)


__all__ = [
    "InsertEdit",
    "DeleteEdit",
    "BlockEdit",
    "EditDescriptor",
    "HistoryStack",
    "HistoryEmptyError",
    "HistoryOverflowError",
]
