"""Engine configuration and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Literal, Optional, cast

OverflowPolicy = Literal["reject", "drop_oldest"]

ENV_PREFIX = "TEXT_ENGINE_"


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Per-session knobs.

    ``history_capacity`` bounds each of the undo and redo stacks.
    ``overflow`` decides what a full undo stack does with a new entry:
    ``"drop_oldest"`` evicts the bottom entry, ``"reject"`` makes the session
    refuse further edits until an undo frees a slot.
    """

    history_capacity: int = 100
    overflow: OverflowPolicy = "drop_oldest"
    dictionary_path: str = "dictionary.txt"
    max_suggestions: int = 10
    encoding: str = "latin-1"
    max_tabs: int = 10

    def __post_init__(self) -> None:
        if self.history_capacity < 1:
            raise ValueError("history_capacity must be positive")
        if self.overflow not in ("reject", "drop_oldest"):
            raise ValueError(f"Unknown overflow policy '{self.overflow}'")
        if self.max_suggestions < 1:
            raise ValueError("max_suggestions must be positive")
        if self.max_tabs < 1:
            raise ValueError("max_tabs must be positive")

    @classmethod
    def from_env(cls, **overrides: object) -> "EngineConfig":
        """Build a config from ``TEXT_ENGINE_*`` variables, then ``overrides``."""

        base = cls()
        config = replace(
            base,
            history_capacity=_env_int("HISTORY_CAPACITY", base.history_capacity),
            overflow=cast(OverflowPolicy, _env("HISTORY_OVERFLOW") or base.overflow),
            dictionary_path=_env("DICTIONARY") or base.dictionary_path,
            max_suggestions=_env_int("MAX_SUGGESTIONS", base.max_suggestions),
            encoding=_env("ENCODING") or base.encoding,
            max_tabs=_env_int("MAX_TABS", base.max_tabs),
        )
        return replace(config, **overrides) if overrides else config


def _env(name: str) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}{name}")


def _env_int(name: str, fallback: int) -> int:
    value = _env(name)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


__all__ = ["EngineConfig", "OverflowPolicy"]
