"""Editing session: buffer, history, clipboard and dictionary behind one façade."""

from __future__ import annotations

import os
from contextlib import AbstractContextManager
from typing import Callable, ContextManager, List, Optional, Tuple

from text_engine.buffer import (
    BlockEdit,
    BufferValidationError,
    ClipboardSlot,
    DeleteEdit,
    Direction,
    EditDescriptor,
    HistoryEmptyError,
    HistoryOverflowError,
    HistoryStack,
    InsertEdit,
    InvalidCharError,
    InvalidQueryError,
    NothingToDeleteError,
    TextBuffer,
    ensure_char,
    ensure_query,
    ensure_range,
    replace_all,
)
from text_engine.config import EngineConfig
from text_engine.dictionary import (
    ALPHABET,
    Dictionary,
    InvalidLimitError,
    InvalidWordError,
    load_dictionary,
)
from text_engine.runtime import telemetry

from .base import ActionResult, SessionBus

Misspelling = Tuple[str, int]

# Checked in order, so subclasses must precede their bases.
_REJECTIONS: Tuple[Tuple[type[Exception], str], ...] = (
    (NothingToDeleteError, "nothing_to_delete"),
    (InvalidCharError, "invalid_char"),
    (BufferValidationError, "invalid_range"),
    (InvalidQueryError, "invalid_query"),
    (InvalidWordError, "invalid_word"),
    (InvalidLimitError, "invalid_argument"),
    (HistoryEmptyError, "history_empty"),
    (HistoryOverflowError, "history_full"),
    (UnicodeError, "encoding_error"),
    (OSError, "io_error"),
)


class EditorSession:
    """One independent editing session.

    Content edits capture an edit descriptor, mutate the buffer, push the
    descriptor on the undo stack and clear the redo stack. Read-only queries
    never touch history. Every public action returns an ``ActionResult``;
    refusals come back as ``ok=False`` results rather than exceptions.
    """

    def __init__(
        self,
        *,
        name: str = "untitled",
        config: Optional[EngineConfig] = None,
        dictionary: Optional[Dictionary] = None,
        bus: Optional[SessionBus] = None,
    ) -> None:
        self.name = name
        self.config = config or EngineConfig()
        self.buffer = TextBuffer(name=name)
        self.undo_stack = HistoryStack(
            "undo",
            capacity=self.config.history_capacity,
            overflow=self.config.overflow,
        )
        self.redo_stack = HistoryStack(
            "redo",
            capacity=self.config.history_capacity,
            overflow=self.config.overflow,
        )
        self.clipboard = ClipboardSlot()
        if dictionary is None:
            dictionary = load_dictionary(self.config.dictionary_path).dictionary
        self.dictionary = dictionary
        self.bus = bus or SessionBus()
        self.dirty = False
        self.logger = telemetry.get_logger("text_engine.session")

    @classmethod
    def from_text(cls, text: str, **kwargs) -> "EditorSession":
        """Session pre-filled with ``text``; the fill is not undoable."""

        session = cls(**kwargs)
        session.buffer.load_text(text)
        return session

    def text(self) -> str:
        return self.buffer.text()

    # -- editing ------------------------------------------------------------

    def insert_char(self, char: str) -> ActionResult:
        def action() -> ActionResult:
            ensure_char(char)
            self._reserve_history()
            entry = InsertEdit(char, self.buffer.cursor_offset)
            self.buffer.insert_at(char)
            return self._commit(entry)

        return self._run("insert_char", action)

    def delete_char(self) -> ActionResult:
        def action() -> ActionResult:
            self._reserve_history()
            position = self.buffer.cursor_offset
            char = self.buffer.delete_after_cursor()
            return self._commit(DeleteEdit(char, position), payload=char)

        return self._run("delete_char", action)

    def move_cursor(self, direction: Direction | str) -> ActionResult:
        def action() -> ActionResult:
            try:
                motion = Direction(direction)
            except ValueError:
                return ActionResult.rejected(
                    "invalid_direction", f"Unknown direction {direction!r}"
                )
            moved = self.buffer.move_cursor(motion)
            position = self.buffer.cursor_position
            if not moved:
                return ActionResult(
                    ok=False,
                    status="at_boundary",
                    message=f"Cannot move {motion.value}",
                    payload=position,
                )
            return ActionResult.success(position)

        return self._run("move_cursor", action)

    def find_and_replace(self, find: str, replace: str) -> ActionResult:
        def action() -> ActionResult:
            before = self.buffer.text()
            after, count = replace_all(before, ensure_query(find), replace)
            if not count:
                return ActionResult(
                    ok=True,
                    status="no_match",
                    message=f"No occurrences of '{find}' found",
                    payload=0,
                )
            with Transaction(self, "find_and_replace") as tx:
                self.buffer.load_text(after)
                tx.commit(0, before, after)
            return self._after_transaction(tx, count)

        return self._run("find_and_replace", action)

    def insert_line(self, text: str) -> ActionResult:
        """Insert ``text`` plus a newline at the cursor as one edit."""

        def action() -> ActionResult:
            line = text + "\n"
            with Transaction(self, "insert_line") as tx:
                position = self.buffer.cursor_offset
                self.buffer.insert_text(line)
                tx.commit(position, "", line)
            return self._after_transaction(tx)

        return self._run("insert_line", action)

    def delete_line(self) -> ActionResult:
        """Delete from the cursor through the next newline as one edit."""

        def action() -> ActionResult:
            position = self.buffer.cursor_offset
            if position == self.buffer.length:
                raise NothingToDeleteError("Nothing to delete at cursor position")
            rest = self.buffer.extract_range(position, self.buffer.length - 1)
            newline = rest.find("\n")
            removed = rest if newline < 0 else rest[: newline + 1]
            with Transaction(self, "delete_line") as tx:
                self.buffer.replace_span(position, len(removed), "")
                tx.commit(position, removed, "")
            return self._after_transaction(tx, removed)

        return self._run("delete_line", action)

    # -- history ------------------------------------------------------------

    def undo(self) -> ActionResult:
        def action() -> ActionResult:
            entry = self.undo_stack.pop()
            entry.revert(self.buffer)
            self.redo_stack.push(entry)
            self.dirty = True
            self.bus.emit("session.undo", entry)
            return ActionResult.success(entry, message=f"Undone: {entry.label}")

        return self._run("undo", action)

    def redo(self) -> ActionResult:
        def action() -> ActionResult:
            entry = self.redo_stack.pop()
            entry.apply(self.buffer)
            self.undo_stack.push(entry)
            self.dirty = True
            self.bus.emit("session.redo", entry)
            return ActionResult.success(entry, message=f"Redone: {entry.label}")

        return self._run("redo", action)

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    # -- clipboard ----------------------------------------------------------

    def copy(self, start: int, end: int) -> ActionResult:
        def action() -> ActionResult:
            text = self.buffer.extract_range(start, end)
            self.clipboard.store(text)
            self.bus.emit("session.clipboard", {"action": "copy", "text": text})
            return ActionResult.success(text, message=f"Copied {len(text)} characters")

        return self._run("copy", action)

    def cut(self, start: int, end: int) -> ActionResult:
        def action() -> ActionResult:
            ensure_range(self.buffer.length, start, end)
            with Transaction(self, "cut") as tx:
                text = self.buffer.replace_span(start, end - start + 1, "")
                tx.commit(start, text, "")
            self.clipboard.store(text)
            self.bus.emit("session.clipboard", {"action": "cut", "text": text})
            return self._after_transaction(tx, text)

        return self._run("cut", action)

    def paste(self) -> ActionResult:
        def action() -> ActionResult:
            if self.clipboard.is_empty:
                return ActionResult.rejected(
                    "clipboard_empty", "Clipboard is empty. Nothing to paste."
                )
            text = self.clipboard.text
            with Transaction(self, "paste") as tx:
                position = self.buffer.cursor_offset
                self.buffer.insert_text(text)
                tx.commit(position, "", text)
            self.bus.emit("session.clipboard", {"action": "paste", "text": text})
            return self._after_transaction(tx, text)

        return self._run("paste", action)

    # -- read-only queries --------------------------------------------------

    def char_count(self) -> ActionResult:
        return ActionResult.success(self.buffer.char_count())

    def word_count(self) -> ActionResult:
        return ActionResult.success(self.buffer.word_count())

    def line_count(self) -> ActionResult:
        return ActionResult.success(self.buffer.line_count())

    def search(self, word: str) -> ActionResult:
        def action() -> ActionResult:
            offsets = self.buffer.search_all(word)
            if not offsets:
                return ActionResult(
                    ok=True,
                    status="no_match",
                    message=f"Word '{word}' not found",
                    payload=offsets,
                )
            return ActionResult.success(offsets)

        return self._run("search", action)

    def dictionary_contains(self, word: str) -> ActionResult:
        return self._run(
            "dictionary_contains",
            lambda: ActionResult.success(self.dictionary.contains(word)),
        )

    def dictionary_suggest(
        self, prefix: str, max_results: Optional[int] = None
    ) -> ActionResult:
        limit = self.config.max_suggestions if max_results is None else max_results
        return self._run(
            "dictionary_suggest",
            lambda: ActionResult.success(
                list(self.dictionary.suggest_prefix(prefix, limit))
            ),
        )

    def spell_check(self) -> ActionResult:
        """Alphanumeric runs unknown to the dictionary, with their offsets.

        Runs holding anything besides the letters a-z are always reported.
        """

        def action() -> ActionResult:
            misspelled: List[Misspelling] = [
                (word, offset)
                for word, offset in _iter_words(self.buffer.text())
                if not _is_letters(word) or word not in self.dictionary
            ]
            return ActionResult.success(
                misspelled, message=f"Found {len(misspelled)} misspelled word(s)"
            )

        return self._run("spell_check", action)

    # -- byte streams -------------------------------------------------------

    def load_bytes(self, data: bytes) -> ActionResult:
        """Replace the content with ``data``; not undoable, history is reset."""

        def action() -> ActionResult:
            text = bytes(data).decode(self.config.encoding)
            self.buffer.load_text(text)
            self.undo_stack.clear()
            self.redo_stack.clear()
            self.logger.debug(f"{self.name}: loaded {self.buffer.length} characters")
            self.dirty = False
            self.bus.emit("session.load", {"length": self.buffer.length})
            return ActionResult.success(self.buffer.length)

        return self._run("load_bytes", action)

    def to_bytes(self) -> ActionResult:
        """Raw document bytes, no header or framing."""

        return self._run(
            "to_bytes",
            lambda: ActionResult.success(self.text().encode(self.config.encoding)),
        )

    def load_file(self, path: str | os.PathLike[str]) -> ActionResult:
        def action() -> ActionResult:
            with open(path, "rb") as handle:
                data = handle.read()
            return self.load_bytes(data)

        return self._run("load_file", action)

    def save_file(self, path: str | os.PathLike[str]) -> ActionResult:
        def action() -> ActionResult:
            data = self.text().encode(self.config.encoding)
            with open(path, "wb") as handle:
                handle.write(data)
            self.dirty = False
            return ActionResult.success(len(data), message=f"Saved {os.fspath(path)}")

        return self._run("save_file", action)

    # -- plumbing -----------------------------------------------------------

    def _reserve_history(self) -> None:
        """Refuse an edit up front when its descriptor could not be recorded."""

        if self.undo_stack.is_full() and self.undo_stack.overflow == "reject":
            raise HistoryOverflowError(
                self.undo_stack.name, self.undo_stack.capacity
            )

    def _commit(self, entry: EditDescriptor, *, payload: object = None) -> ActionResult:
        """Record ``entry`` after its edit was applied to the buffer."""

        self.redo_stack.clear()
        evicted = self.undo_stack.push(entry)
        if evicted is not None:
            telemetry.record_event(
                "history.evicted",
                level="debug",
                data={"session": self.name, "label": evicted.label},
            )
        self.dirty = True
        self.bus.emit("session.edit", entry)
        return ActionResult.success(payload)

    def _after_transaction(
        self, tx: "Transaction", payload: object = None
    ) -> ActionResult:
        if tx.result is None:
            raise RuntimeError(f"Transaction '{tx.label}' was never committed")
        tx.result.payload = payload
        return tx.result

    def _run(self, label: str, action: Callable[[], ActionResult]) -> ActionResult:
        with telemetry.span(
            f"session::{label}",
            component="session",
            metadata={"session": self.name},
        ) as handle:
            try:
                return action()
            except Exception as exc:
                status = _rejection_status(exc)
                if status is None:
                    raise
                handle.reject(str(exc))
                self.bus.emit(
                    "session.rejected",
                    {"action": label, "status": status, "message": str(exc)},
                )
                return ActionResult.rejected(status, str(exc))


class Transaction(AbstractContextManager["Transaction"]):
    """Boundary around a compound edit.

    Raw buffer mutations made inside the block are recorded as exactly one
    ``BlockEdit`` when ``commit`` is called. Leaving the block without a
    commit (or through an exception) records nothing.
    """

    def __init__(self, session: EditorSession, label: str) -> None:
        self.session = session
        self.label = label
        self.entry: Optional[BlockEdit] = None
        self.result: Optional[ActionResult] = None
        self._span_cm: Optional[ContextManager[object]] = None
        self._cursor_before = 0

    def __enter__(self) -> "Transaction":
        self.session._reserve_history()
        self._cursor_before = self.session.buffer.cursor_offset
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.session.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, position: int, removed: str, inserted: str) -> BlockEdit:
        if self.entry is not None:
            raise RuntimeError(f"Transaction '{self.label}' already committed")
        self.entry = BlockEdit(
            position=position,
            removed=removed,
            inserted=inserted,
            label=self.label,
            cursor_before=self._cursor_before,
        )
        self.result = self.session._commit(self.entry)
        return self.entry

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _rejection_status(exc: Exception) -> Optional[str]:
    for kind, status in _REJECTIONS:
        if isinstance(exc, kind):
            return status
    return None


def _iter_words(text: str):
    start = -1
    for index, char in enumerate(text):
        if char.isalnum():
            if start < 0:
                start = index
        elif start >= 0:
            yield text[start:index], start
            start = -1
    if start >= 0:
        yield text[start:], start


def _is_letters(word: str) -> bool:
    return all(char in ALPHABET for char in word.lower())


__all__ = ["EditorSession", "Transaction", "Misspelling"]
