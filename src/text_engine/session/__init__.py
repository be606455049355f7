"""Editing sessions and the action surface offered to hosts."""

from .base import ActionResult, SessionBus
from .session import EditorSession, Misspelling, Transaction
from .workspace import Workspace, WorkspaceError

__all__ = [
    "ActionResult",
    "SessionBus",
    "EditorSession",
    "Misspelling",
    "Transaction",
    "Workspace",
    "WorkspaceError",
]
