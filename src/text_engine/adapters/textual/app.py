"""Executable Textual app that hosts editing sessions."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when the app is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use text_engine.adapters.textual.app"
    ) from exc

from text_engine.buffer import BufferMirror
from text_engine.config import EngineConfig
from text_engine.runtime import telemetry
from text_engine.session import Workspace

from .controller import TextualSessionAdapter, TextualUIHooks

CURSOR_MARK = "│"


def create_default_workspace(
    path: Optional[str] = None, *, config: Optional[EngineConfig] = None
) -> Workspace:
    """Workspace with one tab, optionally filled from ``path``."""

    workspace = Workspace(config=config or EngineConfig.from_env())
    session = workspace.add(os.path.basename(path) if path else "untitled")
    if path and os.path.exists(path):
        session.load_file(path)
    return workspace


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""
    command_text: Optional[str] = None


class TextEngineApp(App[None]):
    """Minimal Textual UI embedding the editing engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#command-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, path: Optional[str] = None) -> None:
        super().__init__()
        self._state = UIState()
        self._path = path
        self.adapter: TextualSessionAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._command_widget: Static | None = None
        self._log = telemetry.get_logger("text_engine.app")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view", markup=False)
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line", markup=False)
        self._command_widget = Static("", id="command-line", markup=False)
        yield self._status_widget
        yield self._command_widget
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            show_command=self._show_command,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        workspace = create_default_workspace(self._path)
        self.adapter = TextualSessionAdapter(workspace, hooks)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        text = mirror.text
        self._state.buffer_text = (
            text[: mirror.offset] + CURSOR_MARK + text[mirror.offset :]
        )
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)
        row, col = mirror.cursor
        self.sub_title = f"{mirror.attributes.get('tab', '')} {row + 1}:{col + 1}"

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _show_command(self, command: Optional[str]) -> None:
        self._state.command_text = command
        if self._command_widget:
            self._command_widget.update("" if command is None else f"> {command}")

    def _handle_event(self, name: str, payload: Any | None) -> None:
        if name == "session.rejected" and isinstance(payload, dict):
            self._update_status(f"{payload.get('status')}: {payload.get('message')}")

    def _log_line(self, line: str) -> None:
        self._log.debug(line)

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key == "ctrl+q":
            return None
        if key.startswith("ctrl+"):
            return (key.rsplit("+", 1)[-1].upper(), None, ("CTRL",))
        if key == "escape":
            return ("ESC", None, ())
        if key in {"enter", "return"}:
            return ("ENTER", None, ())
        if key in {"tab", "backspace", "delete", "left", "right", "up", "down"}:
            return (key.upper(), None, ())
        if event.character and event.is_printable:
            return (event.character, event.character, ())
        return None


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the text engine Textual app.")
    parser.add_argument("path", nargs="?", help="File to open in the first tab")
    parser.add_argument(
        "--log-preset",
        choices=telemetry.PRESETS,
        default=os.environ.get("TEXT_ENGINE_LOG_PRESET", "quiet"),
        help="Telemetry preset (default: quiet, keeps the terminal clean)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset=args.log_preset)
    TextEngineApp(path=args.path).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
