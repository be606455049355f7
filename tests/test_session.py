from __future__ import annotations

from pathlib import Path
from typing import Any, List, Tuple

from text_engine.buffer import Direction
from text_engine.config import EngineConfig
from text_engine.dictionary import Dictionary
from text_engine.session import EditorSession

WORDS = ["the", "cat", "car", "cap", "hello", "world"]


def make_session(text: str = "", **config: Any) -> EditorSession:
    return EditorSession.from_text(
        text,
        name="test",
        config=EngineConfig(**config),
        dictionary=Dictionary(WORDS),
    )


def record_events(session: EditorSession, *names: str) -> List[Tuple[str, Any]]:
    seen: List[Tuple[str, Any]] = []
    for name in names:
        session.bus.subscribe(
            name, lambda payload, name=name: seen.append((name, payload))
        )
    return seen


def test_char_count_tracks_surviving_characters() -> None:
    session = make_session()
    for char in "abcdef":
        assert session.insert_char(char).ok
    session.move_cursor(Direction.LEFT)
    session.move_cursor(Direction.LEFT)
    session.delete_char()
    session.delete_char()

    assert session.text() == "abcd"
    assert session.char_count().payload == 4


def test_insert_then_undo_restores_content_and_cursor() -> None:
    session = make_session("ab")
    session.move_cursor(Direction.LEFT)

    session.insert_char("x")
    assert session.text() == "axb"

    result = session.undo()
    assert result.ok
    assert session.text() == "ab"
    assert session.buffer.cursor_offset == 1
    assert session.buffer.cursor_position == (0, 1)


def test_undo_then_redo_reproduces_prior_state() -> None:
    session = make_session("ab")
    session.move_cursor(Direction.LEFT)
    session.insert_char("x")
    before = (session.text(), session.buffer.cursor_offset)

    session.undo()
    session.redo()

    assert (session.text(), session.buffer.cursor_offset) == before
    assert not session.can_redo()
    assert session.can_undo()


def test_delete_char_undo_reinserts_at_same_offset() -> None:
    session = make_session("abc")
    session.move_cursor(Direction.LEFT)
    session.move_cursor(Direction.LEFT)

    result = session.delete_char()
    assert result.payload == "b"
    assert session.text() == "ac"

    session.undo()
    assert session.text() == "abc"
    assert session.buffer.cursor_offset == 1


def test_delete_at_end_is_rejected_without_history() -> None:
    session = make_session("ab")
    rejected = record_events(session, "session.rejected")

    result = session.delete_char()

    assert not result.ok
    assert result.status == "nothing_to_delete"
    assert len(session.undo_stack) == 0
    assert rejected[0][1]["action"] == "delete_char"


def test_undo_on_empty_stack_is_rejected() -> None:
    session = make_session("hello")

    result = session.undo()

    assert not result.ok
    assert result.status == "history_empty"
    assert session.text() == "hello"
    assert session.buffer.cursor_offset == 5
    assert not session.can_redo()
    assert not session.dirty


def test_new_edit_clears_redo() -> None:
    session = make_session()
    session.insert_char("a")
    session.undo()
    assert session.can_redo()

    session.insert_char("b")

    assert not session.can_redo()
    assert session.redo().status == "history_empty"


def test_copy_then_paste_at_end() -> None:
    session = make_session("hello world")

    copied = session.copy(0, 4)
    assert copied.payload == "hello"
    assert session.clipboard.length == 5

    assert session.paste().ok
    assert session.text() == "hello worldhello"
    assert len(session.undo_stack) == 1

    session.undo()
    assert session.text() == "hello world"
    assert session.buffer.cursor_offset == 11


def test_copy_out_of_range_is_rejected() -> None:
    session = make_session("hello")
    for start, end in [(-1, 2), (0, 5), (3, 1)]:
        result = session.copy(start, end)
        assert not result.ok
        assert result.status == "invalid_range"
    assert session.clipboard.is_empty


def test_cut_is_a_single_history_entry() -> None:
    session = make_session("hello world")

    result = session.cut(0, 5)

    assert result.payload == "hello "
    assert session.text() == "world"
    assert session.clipboard.text == "hello "
    assert len(session.undo_stack) == 1

    session.undo()
    assert session.text() == "hello world"
    session.redo()
    assert session.text() == "world"


def test_paste_with_empty_clipboard() -> None:
    session = make_session("abc")

    result = session.paste()

    assert not result.ok
    assert result.status == "clipboard_empty"
    assert session.text() == "abc"


def test_find_and_replace_is_one_undoable_step() -> None:
    session = make_session("cat cats catalog")

    result = session.find_and_replace("cat", "dog")

    assert result.payload == 3
    assert session.text() == "dog dogs dogalog"
    assert len(session.undo_stack) == 1

    session.undo()
    assert session.text() == "cat cats catalog"
    session.redo()
    assert session.text() == "dog dogs dogalog"


def test_find_and_replace_without_match_records_nothing() -> None:
    session = make_session("hello")

    result = session.find_and_replace("xyz", "abc")

    assert result.ok
    assert result.status == "no_match"
    assert result.payload == 0
    assert len(session.undo_stack) == 0
    assert session.find_and_replace("", "x").status == "invalid_query"


def test_search_reports_offsets() -> None:
    session = make_session("The cat saw the Cat")

    assert session.search("cat").payload == [4, 16]
    missing = session.search("dog")
    assert missing.ok and missing.status == "no_match" and missing.payload == []
    assert session.search("").status == "invalid_query"


def test_move_cursor_reports_boundary() -> None:
    session = make_session()

    result = session.move_cursor(Direction.LEFT)

    assert not result.ok
    assert result.status == "at_boundary"
    assert result.payload == (0, 0)


def test_insert_and_delete_line() -> None:
    session = make_session("one\ntwo")
    session.buffer.set_cursor_offset(0)

    inserted = session.insert_line("zero")
    assert inserted.ok
    assert session.text() == "zero\none\ntwo"

    deleted = session.delete_line()
    assert deleted.payload == "one\n"
    assert session.text() == "zero\ntwo"
    assert len(session.undo_stack) == 2

    session.undo()
    session.undo()
    assert session.text() == "one\ntwo"


def test_delete_line_at_end_is_rejected() -> None:
    session = make_session("abc")
    assert session.delete_line().status == "nothing_to_delete"


def test_reject_policy_refuses_edits_when_history_is_full() -> None:
    session = make_session(history_capacity=2, overflow="reject")
    session.insert_char("a")
    session.insert_char("b")

    refused = session.insert_char("c")
    assert not refused.ok
    assert refused.status == "history_full"
    assert session.text() == "ab"
    assert session.cut(0, 0).status == "history_full"
    assert session.text() == "ab"

    session.undo()
    assert session.insert_char("c").ok
    assert session.text() == "ac"


def test_drop_oldest_policy_forgets_first_edit() -> None:
    session = make_session(history_capacity=2)
    for char in "abc":
        session.insert_char(char)

    session.undo()
    session.undo()

    assert session.text() == "a"
    assert session.undo().status == "history_empty"


def test_dictionary_queries() -> None:
    session = make_session()

    assert session.dictionary_contains("Cat").payload is True
    assert session.dictionary_contains("dog").payload is False
    assert session.dictionary_contains("123").status == "invalid_word"
    assert session.dictionary_suggest("ca", 10).payload == ["cap", "car", "cat"]
    assert session.dictionary_suggest("ca", 2).payload == ["cap", "car"]
    assert session.dictionary_suggest("").status == "invalid_word"


def test_spell_check_lists_unknown_words_with_offsets() -> None:
    session = make_session("the cat sat")

    result = session.spell_check()

    assert result.payload == [("sat", 8)]
    assert len(session.undo_stack) == 0


def test_byte_round_trip_is_exact() -> None:
    session = make_session("old")
    session.insert_char("!")
    data = bytes(range(1, 256)) + b"\n\r\n"

    loaded = session.load_bytes(data)

    assert loaded.ok
    assert session.to_bytes().payload == data
    assert not session.can_undo()
    assert not session.dirty


def test_load_bytes_with_undecodable_input() -> None:
    session = make_session("keep", encoding="utf-8")

    result = session.load_bytes(b"\xff\xfe")

    assert result.status == "encoding_error"
    assert session.text() == "keep"


def test_save_and_load_file(tmp_path: Path) -> None:
    path = tmp_path / "note.txt"
    session = make_session("hi\nthere")
    session.insert_char("!")

    saved = session.save_file(path)
    assert saved.payload == 9
    assert path.read_bytes() == b"hi\nthere!"
    assert not session.dirty

    other = make_session()
    assert other.load_file(path).ok
    assert other.text() == "hi\nthere!"
    assert other.load_file(tmp_path / "missing.txt").status == "io_error"


def test_edits_emit_bus_events() -> None:
    session = make_session()
    events = record_events(session, "session.edit", "session.undo", "session.redo")

    session.insert_char("a")
    session.undo()
    session.redo()

    assert [name for name, _ in events] == [
        "session.edit",
        "session.undo",
        "session.redo",
    ]


def test_dictionary_suggest_rejects_non_positive_limits() -> None:
    session = make_session()

    for limit in (0, -1):
        result = session.dictionary_suggest("ca", limit)
        assert not result.ok
        assert result.status == "invalid_argument"
    assert session.dictionary_suggest("ca").payload == ["cap", "car", "cat"]


def test_move_cursor_with_unknown_direction() -> None:
    session = make_session("ab")

    result = session.move_cursor("diagonal")

    assert not result.ok
    assert result.status == "invalid_direction"
    assert session.buffer.cursor_offset == 2


def test_spell_check_reports_tokens_mixing_letters_and_digits() -> None:
    session = make_session("cat1 123 cat")

    assert session.spell_check().payload == [("cat1", 0), ("123", 5)]


def test_find_and_replace_without_match_ignores_full_history() -> None:
    session = make_session("abc", history_capacity=1, overflow="reject")
    session.insert_char("d")

    missing = session.find_and_replace("zzz", "y")
    assert missing.ok
    assert missing.status == "no_match"

    refused = session.find_and_replace("abc", "y")
    assert refused.status == "history_full"
    assert session.text() == "abcd"


def test_insert_char_rejects_multiple_characters() -> None:
    session = make_session()

    result = session.insert_char("ab")

    assert not result.ok
    assert result.status == "invalid_char"
    assert session.text() == ""
