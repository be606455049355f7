"""Single-slot clipboard shared by copy, cut and paste."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ClipboardSlot:
    """Holds at most one block of text; every store replaces the previous one."""

    text: str = ""

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def is_empty(self) -> bool:
        return not self.text

    def store(self, text: str) -> None:
        self.text = text

    def clear(self) -> None:
        self.text = ""
