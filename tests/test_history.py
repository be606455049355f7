from __future__ import annotations

import pytest

from text_engine.buffer import (
    BlockEdit,
    DeleteEdit,
    HistoryEmptyError,
    HistoryOverflowError,
    HistoryStack,
    InsertEdit,
    TextBuffer,
)


def test_drop_oldest_evicts_bottom_entry() -> None:
    stack = HistoryStack("undo", capacity=2)
    first, second, third = (InsertEdit(c, i) for i, c in enumerate("abc"))

    assert stack.push(first) is None
    assert stack.push(second) is None
    assert stack.push(third) is first
    assert stack.entries() == (second, third)


def test_reject_policy_leaves_entries_untouched() -> None:
    stack = HistoryStack("undo", capacity=1, overflow="reject")
    kept = InsertEdit("a", 0)
    stack.push(kept)

    with pytest.raises(HistoryOverflowError) as info:
        stack.push(InsertEdit("b", 1))

    assert info.value.capacity == 1
    assert stack.entries() == (kept,)


def test_pop_on_empty_stack() -> None:
    stack = HistoryStack("redo")
    assert not stack
    assert stack.peek() is None
    with pytest.raises(HistoryEmptyError, match="Nothing to redo"):
        stack.pop()


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        HistoryStack("undo", capacity=0)


def test_insert_edit_targets_exact_position_among_repeats() -> None:
    buffer = TextBuffer.from_text("aaa")
    edit = InsertEdit("a", 1)

    edit.apply(buffer)
    assert buffer.text() == "aaaa"
    assert buffer.cursor_offset == 2

    edit.revert(buffer)
    assert buffer.text() == "aaa"
    assert buffer.cursor_offset == 1


def test_delete_edit_round_trip() -> None:
    buffer = TextBuffer.from_text("abc")
    edit = DeleteEdit("b", 1)

    edit.apply(buffer)
    assert buffer.text() == "ac"

    edit.revert(buffer)
    assert buffer.text() == "abc"
    assert buffer.cursor_offset == 1


def test_block_edit_restores_cursor_on_revert() -> None:
    buffer = TextBuffer.from_text("hello world")
    edit = BlockEdit(6, "world", "there", label="paste", cursor_before=3)

    edit.apply(buffer)
    assert buffer.text() == "hello there"
    assert edit.length == 5

    edit.revert(buffer)
    assert buffer.text() == "hello world"
    assert buffer.cursor_offset == 3
