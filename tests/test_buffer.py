from __future__ import annotations

import pytest

from text_engine.buffer import (
    HEAD,
    BufferValidationError,
    CellChain,
    Direction,
    InvalidQueryError,
    NothingToDeleteError,
    TextBuffer,
    replace_all,
)


def make_buffer(text: str = "") -> TextBuffer:
    return TextBuffer.from_text(text, name="test")


def test_cell_chain_recycles_unlinked_cells() -> None:
    chain = CellChain()
    first = chain.link_after(HEAD, "a")
    assert chain.unlink(first) == "a"
    assert not chain.is_live(first)

    second = chain.link_after(HEAD, "b")

    assert second == first
    assert chain.is_live(second)
    assert chain.text() == "b"
    assert len(chain) == 1


def test_cell_chain_refuses_to_unlink_sentinels() -> None:
    chain = CellChain()
    with pytest.raises(IndexError):
        chain.unlink(HEAD)


def test_insert_tracks_row_col_and_offset() -> None:
    buffer = make_buffer("ab\ncd")

    assert buffer.text() == "ab\ncd"
    assert buffer.length == 5
    assert buffer.cursor_position == (1, 2)
    assert buffer.cursor_offset == 5


def test_insert_in_middle_moves_cursor_past_new_char() -> None:
    buffer = make_buffer("ac")
    buffer.set_cursor_offset(1)

    buffer.insert_at("b")

    assert buffer.text() == "abc"
    assert buffer.cursor_offset == 2
    assert buffer.cursor_position == (0, 2)


def test_delete_after_cursor_at_end_is_refused() -> None:
    buffer = make_buffer("ab")
    with pytest.raises(NothingToDeleteError):
        buffer.delete_after_cursor()
    assert buffer.text() == "ab"


def test_delete_after_cursor_removes_next_char() -> None:
    buffer = make_buffer("abc")
    buffer.set_cursor_offset(1)

    assert buffer.delete_after_cursor() == "b"
    assert buffer.text() == "ac"
    assert buffer.cursor_offset == 1


def test_horizontal_motion_crosses_newlines_and_clamps() -> None:
    buffer = make_buffer("ab\ncd")
    buffer.set_cursor_offset(3)
    assert buffer.cursor_position == (1, 0)

    assert buffer.move_cursor(Direction.LEFT)
    assert buffer.cursor_position == (0, 2)
    assert buffer.cursor_offset == 2

    assert buffer.move_cursor("right")
    assert buffer.cursor_position == (1, 0)

    buffer.set_cursor_offset(0)
    assert not buffer.move_cursor(Direction.LEFT)
    buffer.set_cursor_offset(5)
    assert not buffer.move_cursor(Direction.RIGHT)


def test_vertical_motion_lands_on_column_zero() -> None:
    buffer = make_buffer("ab\ncd")

    assert buffer.move_cursor(Direction.UP)
    assert buffer.cursor_position == (0, 0)
    assert buffer.cursor_offset == 0
    assert not buffer.move_cursor(Direction.UP)

    assert buffer.move_cursor(Direction.DOWN)
    assert buffer.cursor_position == (1, 0)
    assert buffer.cursor_offset == 3
    assert not buffer.move_cursor(Direction.DOWN)


def test_extract_range_is_inclusive_and_validated() -> None:
    buffer = make_buffer("hello world")

    assert buffer.extract_range(0, 4) == "hello"
    assert buffer.extract_range(6, 10) == "world"
    for start, end in [(-1, 2), (0, 11), (4, 2)]:
        with pytest.raises(BufferValidationError):
            buffer.extract_range(start, end)


def test_search_all_ignores_case_and_reports_overlaps() -> None:
    buffer = make_buffer("Cat cAT ababa")

    assert buffer.search_all("cat") == [0, 4]
    assert buffer.search_all("aba") == [8, 10]
    assert buffer.search_all("dog") == []
    with pytest.raises(InvalidQueryError):
        buffer.search_all("")


def test_find_and_replace_counts_greedy_matches() -> None:
    buffer = make_buffer("cat cats catalog")

    assert buffer.find_and_replace("cat", "dog") == 3
    assert buffer.text() == "dog dogs dogalog"


def test_find_and_replace_without_match_leaves_buffer_alone() -> None:
    buffer = make_buffer("hello")
    buffer.set_cursor_offset(2)
    version = buffer.version

    assert buffer.find_and_replace("xyz", "q") == 0
    assert buffer.version == version
    assert buffer.cursor_offset == 2


def test_replace_all_matches_original_text_only() -> None:
    assert replace_all("aaa", "aa", "b") == ("ba", 1)
    assert replace_all("CAT", "cat", "dog") == ("dog", 1)
    # The replacement contains the needle but is never rescanned.
    assert replace_all("ab", "a", "aa") == ("aab", 1)


def test_replace_span_returns_removed_text() -> None:
    buffer = make_buffer("hello world")

    assert buffer.replace_span(6, 5, "there") == "world"
    assert buffer.text() == "hello there"
    assert buffer.cursor_offset == 11
    with pytest.raises(BufferValidationError):
        buffer.replace_span(8, 10, "")


def test_counts() -> None:
    buffer = make_buffer("hello, world 42\nbye\n")

    assert buffer.char_count() == 20
    assert buffer.word_count() == 4
    assert buffer.line_count() == 3


def test_mirror_snapshots_text_and_cursor() -> None:
    buffer = make_buffer("a\nb")
    mirror = buffer.mirror(attributes={"tab": "notes"})

    assert mirror.text == "a\nb"
    assert mirror.cursor == (1, 1)
    assert mirror.offset == 3
    assert mirror.attributes == {"tab": "notes"}
