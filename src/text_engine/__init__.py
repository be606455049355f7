"""In-memory text editing engine: buffer, undo/redo history and dictionary."""

__all__ = [
    "adapters",
    "buffer",
    "config",
    "dictionary",
    "runtime",
    "session",
]

__version__ = "0.1.0"
