"""Text storage, cursor, clipboard and undo/redo data structures."""

from .buffer import TextBuffer, replace_all
from .cells import HEAD, TAIL, Cell, CellChain
from .clipboard import ClipboardSlot
from .state import Cursor, CursorState, Direction
from .sync import (
    BufferMirror,
    BufferValidationError,
    InvalidCharError,
    InvalidQueryError,
    NothingToDeleteError,
)
from .undo import (
    BlockEdit,
    DeleteEdit,
    EditDescriptor,
    HistoryEmptyError,
    HistoryOverflowError,
    HistoryStack,
    InsertEdit,
)
from .validation import ensure_char, ensure_query, ensure_range

__all__ = [
    "HEAD",
    "TAIL",
    "Cell",
    "CellChain",
    "Cursor",
    "CursorState",
    "Direction",
    "TextBuffer",
    "replace_all",
    "ClipboardSlot",
    "BufferMirror",
    "BufferValidationError",
    "InvalidCharError",
    "InvalidQueryError",
    "NothingToDeleteError",
    "InsertEdit",
    "DeleteEdit",
    "BlockEdit",
    "EditDescriptor",
    "HistoryStack",
    "HistoryEmptyError",
    "HistoryOverflowError",
    "ensure_char",
    "ensure_query",
    "ensure_range",
]
