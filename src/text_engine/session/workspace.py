"""Container routing commands to one of several isolated sessions."""

from __future__ import annotations

from typing import Dict, List, Optional

from text_engine.config import EngineConfig
from text_engine.dictionary import Dictionary, load_dictionary
from text_engine.runtime import telemetry

from .session import EditorSession


class WorkspaceError(RuntimeError):
    """Raised for unknown tabs or when the tab limit is reached."""


class Workspace:
    """Ordered tabs, each an independent ``EditorSession``.

    Sessions never share buffers, history or clipboards. The dictionary is
    loaded once and shared, since nothing mutates it after population.
    """

    def __init__(
        self,
        *,
        config: Optional[EngineConfig] = None,
        dictionary: Optional[Dictionary] = None,
    ) -> None:
        self.config = config or EngineConfig()
        if dictionary is None:
            dictionary = load_dictionary(self.config.dictionary_path).dictionary
        self.dictionary = dictionary
        self._sessions: Dict[str, EditorSession] = {}
        self._active: Optional[str] = None

    @property
    def active(self) -> Optional[EditorSession]:
        if self._active is None:
            return None
        return self._sessions[self._active]

    def names(self) -> List[str]:
        return list(self._sessions)

    def add(self, name: str, *, activate: bool = True) -> EditorSession:
        if name in self._sessions:
            raise WorkspaceError(f"Tab '{name}' already open")
        if len(self._sessions) >= self.config.max_tabs:
            raise WorkspaceError(f"Cannot open more than {self.config.max_tabs} tabs")
        session = EditorSession(
            name=name, config=self.config, dictionary=self.dictionary
        )
        self._sessions[name] = session
        if activate or self._active is None:
            self._active = name
        telemetry.record_event("workspace.add", level="debug", data={"tab": name})
        return session

    def switch(self, name: str) -> EditorSession:
        if name not in self._sessions:
            raise WorkspaceError(f"No tab named '{name}'")
        self._active = name
        return self._sessions[name]

    def remove(self, name: str) -> EditorSession:
        try:
            session = self._sessions.pop(name)
        except KeyError as exc:
            raise WorkspaceError(f"No tab named '{name}'") from exc
        if self._active == name:
            self._active = next(iter(self._sessions), None)
        return session

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, name: object) -> bool:
        return name in self._sessions


__all__ = ["Workspace", "WorkspaceError"]
