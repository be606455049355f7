"""Validation helpers shared across buffer services."""

from __future__ import annotations

from typing import Tuple

from .sync import BufferValidationError, InvalidCharError, InvalidQueryError


def ensure_range(length: int, start: int, end: int) -> Tuple[int, int]:
    """Check an inclusive ``[start, end]`` span against a buffer of ``length``."""

    if start < 0 or end >= length or start > end:
        raise BufferValidationError(
            f"Invalid range [{start}, {end}] for {length} character(s)",
            span=(start, end),
            length=length,
        )
    return start, end


def ensure_char(char: str) -> str:
    if not isinstance(char, str) or len(char) != 1:
        raise InvalidCharError(f"Expected a single character, got {char!r}")
    return char


def ensure_query(query: str) -> str:
    if not query:
        raise InvalidQueryError("Search text cannot be empty", query=query)
    return query
