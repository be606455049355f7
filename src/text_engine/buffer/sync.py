"""Adapter boundary types and the buffer error hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .state import Cursor


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: Cursor
    offset: int
    attributes: dict[str, str] = field(default_factory=dict)


class BufferValidationError(RuntimeError):
    """Raised when a caller hands the buffer an out-of-bounds position or range."""

    def __init__(
        self,
        message: str,
        *,
        span: Optional[Tuple[int, int]] = None,
        length: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.span = span
        self.length = length


class NothingToDeleteError(BufferValidationError):
    """Raised when the cursor already sits on the trailing boundary."""


class InvalidCharError(BufferValidationError):
    """Raised when an insert is handed anything but a single character."""


class InvalidQueryError(ValueError):
    """Raised for empty or otherwise unusable search / replace input."""

    def __init__(self, message: str, *, query: Optional[str] = None) -> None:
        super().__init__(message)
        self.query = query
