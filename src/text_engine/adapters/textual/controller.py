"""Hook-based controller translating Textual key events into session actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from text_engine.buffer import BufferMirror, Direction
from text_engine.session import ActionResult, EditorSession, Workspace, WorkspaceError


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    show_command: Callable[[Optional[str]], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


CommandHandler = Callable[["TextualSessionAdapter", List[str]], ActionResult]

_MOTIONS = {
    "LEFT": Direction.LEFT,
    "RIGHT": Direction.RIGHT,
    "UP": Direction.UP,
    "DOWN": Direction.DOWN,
}

SESSION_EVENTS = (
    "session.edit",
    "session.undo",
    "session.redo",
    "session.clipboard",
    "session.load",
    "session.rejected",
)


class TextualSessionAdapter:
    """Routes keys to the active session of a ``Workspace``.

    ``CTRL+K`` opens a command line (``search cat``, ``replace a b``,
    ``copy 0 4``, ``tab notes`` ...); ``ENTER`` submits it and ``ESC``
    abandons it.
    """

    def __init__(self, workspace: Workspace, hooks: TextualUIHooks) -> None:
        self.workspace = workspace
        self.hooks = hooks
        self.command_text: Optional[str] = None
        if self.workspace.active is None:
            self.workspace.add("untitled")
        self._subscribed: set[int] = set()
        self._subscribe_events()
        self._refresh_buffer()

    @property
    def session(self) -> EditorSession:
        session = self.workspace.active
        assert session is not None
        return session

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ActionResult:
        """Translate one Textual key event and dispatch it."""

        mods = tuple(str(mod).upper() for mod in modifiers)
        self._log_state("key ->", key=key, text=text, mods=mods)
        if self.command_text is not None:
            result = self._edit_command(key, text)
        else:
            result = self._dispatch(key.upper(), text, mods)
        self._after_result(result)
        self._log_state("result <-", ok=result.ok, status=result.status)
        return result

    def submit_command(self, line: str) -> ActionResult:
        parts = line.split()
        if not parts:
            return ActionResult.rejected("command_empty", "Empty command")
        handler = _COMMAND_HANDLERS.get(parts[0])
        if handler is None:
            return ActionResult.rejected(
                "command_error", f"Unknown command '{parts[0]}'"
            )
        return handler(self, parts[1:])

    def _dispatch(
        self, key: str, text: Optional[str], mods: tuple[str, ...]
    ) -> ActionResult:
        session = self.session
        if "CTRL" in mods:
            return self._dispatch_control(key)
        if key in _MOTIONS:
            return session.move_cursor(_MOTIONS[key])
        if key == "DELETE":
            return session.delete_char()
        if key == "BACKSPACE":
            moved = session.move_cursor(Direction.LEFT)
            if not moved.ok:
                return ActionResult.rejected("at_boundary", "Nothing to delete")
            return session.delete_char()
        if key == "ENTER":
            return session.insert_char("\n")
        if key == "TAB":
            return session.insert_char("\t")
        if text is not None and len(text) == 1 and text.isprintable():
            return session.insert_char(text)
        return ActionResult.rejected("unbound", f"No binding for {key}")

    def _dispatch_control(self, key: str) -> ActionResult:
        session = self.session
        if key == "Z":
            return session.undo()
        if key == "Y":
            return session.redo()
        if key == "V":
            return session.paste()
        if key == "K":
            self.command_text = ""
            return ActionResult.success(status="command_start")
        return ActionResult.rejected("unbound", f"No binding for CTRL+{key}")

    def _edit_command(self, key: str, text: Optional[str]) -> ActionResult:
        assert self.command_text is not None
        upper = key.upper()
        if upper in {"ESC", "ESCAPE"}:
            self.command_text = None
            return ActionResult.success(status="command_cancel")
        if upper == "ENTER":
            line, self.command_text = self.command_text, None
            self.hooks.handle_event("command.submit", line)
            return self.submit_command(line)
        if upper == "BACKSPACE":
            self.command_text = self.command_text[:-1]
        elif text is not None and len(text) == 1:
            self.command_text += text
        return ActionResult.success(status="command_edit")

    def _after_result(self, result: ActionResult) -> None:
        status = result.message or result.status
        if status:
            self.hooks.update_status(status)
        self.hooks.show_command(self.command_text)
        self._refresh_buffer()

    def _subscribe_events(self) -> None:
        # Each session owns its bus, so tabs opened later subscribe lazily.
        bus = self.session.bus
        if id(bus) in self._subscribed:
            return
        self._subscribed.add(id(bus))
        for event in SESSION_EVENTS:
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(
            self.session.buffer.mirror(attributes={"tab": self.session.name})
        )

    def _log_state(self, prefix: str, **fields: object) -> None:
        session = self.session
        snapshot: Dict[str, object] = {
            "tab": session.name,
            "cursor": session.buffer.cursor_position,
            "length": session.buffer.length,
            "undo": len(session.undo_stack),
            "redo": len(session.redo_stack),
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))

    def _switch_tab(self, name: str) -> ActionResult:
        try:
            if name in self.workspace:
                self.workspace.switch(name)
            else:
                self.workspace.add(name)
        except WorkspaceError as exc:
            return ActionResult.rejected("workspace_error", str(exc))
        self._subscribe_events()
        return ActionResult.success(name, message=f"tab {name}")


def _expect_ints(args: List[str], count: int) -> Optional[List[int]]:
    if len(args) != count:
        return None
    try:
        return [int(arg) for arg in args]
    except ValueError:
        return None


def _handle_search(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
    result = adapter.session.search(" ".join(args))
    if result.ok and result.payload:
        result.message = f"found at {result.payload}"
    return result


def _handle_replace(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
    if len(args) != 2:
        return ActionResult.rejected("command_error", "usage: replace FIND REPLACE")
    result = adapter.session.find_and_replace(args[0], args[1])
    if result.ok and result.status == "ok":
        result.message = f"replaced {result.payload}"
    return result


def _range_command(name: str) -> CommandHandler:
    def handler(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
        bounds = _expect_ints(args, 2)
        if bounds is None:
            return ActionResult.rejected("command_error", f"usage: {name} START END")
        return getattr(adapter.session, name)(*bounds)

    return handler


def _handle_suggest(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
    if not args:
        return ActionResult.rejected("command_error", "usage: suggest PREFIX [MAX]")
    limit = _expect_ints(args[1:], 1) if len(args) > 1 else None
    result = adapter.session.dictionary_suggest(args[0], limit[0] if limit else None)
    if result.ok and isinstance(result.payload, list):
        result.message = ", ".join(result.payload) or "no suggestions"
    return result


def _handle_spell(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
    del args
    return adapter.session.spell_check()


def _handle_count(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
    del args
    session = adapter.session
    chars = session.char_count().payload
    words = session.word_count().payload
    lines = session.line_count().payload
    return ActionResult.success(
        {"chars": chars, "words": words, "lines": lines},
        message=f"chars={chars} words={words} lines={lines}",
    )


def _handle_open(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
    if len(args) != 1:
        return ActionResult.rejected("command_error", "usage: open PATH")
    return adapter.session.load_file(args[0])


def _handle_save(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
    if len(args) != 1:
        return ActionResult.rejected("command_error", "usage: save PATH")
    return adapter.session.save_file(args[0])


def _handle_line(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
    return adapter.session.insert_line(" ".join(args))


def _handle_delete_line(
    adapter: TextualSessionAdapter, args: List[str]
) -> ActionResult:
    del args
    return adapter.session.delete_line()


def _handle_tab(adapter: TextualSessionAdapter, args: List[str]) -> ActionResult:
    if len(args) != 1:
        return ActionResult.rejected("command_error", "usage: tab NAME")
    return adapter._switch_tab(args[0])


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "search": _handle_search,
    "replace": _handle_replace,
    "copy": _range_command("copy"),
    "cut": _range_command("cut"),
    "suggest": _handle_suggest,
    "spell": _handle_spell,
    "count": _handle_count,
    "open": _handle_open,
    "save": _handle_save,
    "line": _handle_line,
    "dl": _handle_delete_line,
    "tab": _handle_tab,
}


__all__ = ["TextualSessionAdapter", "TextualUIHooks", "SESSION_EVENTS"]
