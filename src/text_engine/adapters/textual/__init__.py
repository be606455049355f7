"""Textual host integration."""

from .controller import SESSION_EVENTS, TextualSessionAdapter, TextualUIHooks

__all__ = ["SESSION_EVENTS", "TextualSessionAdapter", "TextualUIHooks"]
