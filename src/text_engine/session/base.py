"""Result and event types shared by sessions and their hosts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional


@dataclass(slots=True)
class ActionResult:
    """Outcome of one session action.

    ``ok`` is ``False`` whenever the request was refused; ``status`` names the
    outcome (``"ok"``, ``"invalid_range"``, ``"history_empty"``, ...) and
    ``payload`` carries the action's result, if any.
    """

    ok: bool
    status: str = "ok"
    message: Optional[str] = None
    payload: object = None

    @classmethod
    def success(
        cls, payload: object = None, *, status: str = "ok", message: str | None = None
    ) -> "ActionResult":
        return cls(ok=True, status=status, message=message, payload=payload)

    @classmethod
    def rejected(cls, status: str, message: str) -> "ActionResult":
        return cls(ok=False, status=status, message=message)


class SessionBus:
    """Minimal event bus letting hosts observe session activity."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


__all__ = ["ActionResult", "SessionBus"]
