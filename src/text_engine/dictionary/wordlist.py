"""Populate a Dictionary from a word list, falling back to a built-in set."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Iterator, Literal, Optional

from text_engine.runtime import telemetry

from .trie import ALPHABET, Dictionary

# Most frequent English words; keeps spell-check usable without a word list.
BUILTIN_WORDS: tuple[str, ...] = (
    "the", "be", "to", "of", "and", "a", "in", "that", "have", "i",
    "it", "for", "not", "on", "with", "he", "as", "you", "do", "at",
    "this", "but", "his", "by", "from", "they", "we", "say", "her", "she",
    "or", "an", "will", "my", "one", "all", "would", "there", "their", "what",
    "so", "up", "out", "if", "about", "who", "get", "which", "go", "me",
    "when", "make", "can", "like", "time", "no", "just", "him", "know", "take",
    "people", "into", "year", "your", "good", "some", "could", "them", "see", "other",
    "than", "then", "now", "look", "only", "come", "its", "over", "think", "also",
    "back", "after", "use", "two", "how", "our", "work", "first", "well", "way",
    "even", "new", "want", "because", "any", "these", "give", "day", "most", "us",
)  # fmt: skip

DictionarySource = Literal["file", "builtin"]


@dataclass(slots=True)
class DictionaryLoad:
    dictionary: Dictionary
    source: DictionarySource
    path: Optional[str]
    word_count: int


def iter_tokens(text: str) -> Iterator[str]:
    """Lowercased whitespace-separated tokens cut at their first non-letter."""

    for raw in text.split():
        token = []
        for char in raw.lower():
            if char not in ALPHABET:
                break
            token.append(char)
        if token:
            yield "".join(token)


def populate(dictionary: Dictionary, words: Iterable[str]) -> int:
    added = 0
    for word in words:
        if dictionary.insert(word):
            added += 1
    return added


def load_dictionary(
    path: Optional[str | os.PathLike[str]] = None,
    *,
    dictionary: Optional[Dictionary] = None,
) -> DictionaryLoad:
    """Fill ``dictionary`` from ``path``; a missing file means the built-in set.

    Failure to read the list is logged and otherwise swallowed: the caller
    always gets a usable dictionary back.
    """

    target = dictionary if dictionary is not None else Dictionary()
    if path is not None:
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as handle:
                text = handle.read()
        except OSError as exc:
            telemetry.record_event(
                "dictionary.fallback",
                level="warning",
                data={"path": os.fspath(path), "reason": str(exc)},
            )
        else:
            populate(target, iter_tokens(text))
            telemetry.record_event(
                "dictionary.loaded",
                level="debug",
                data={"path": os.fspath(path), "words": len(target)},
            )
            return DictionaryLoad(target, "file", os.fspath(path), len(target))

    populate(target, BUILTIN_WORDS)
    return DictionaryLoad(target, "builtin", None, len(target))


__all__ = [
    "BUILTIN_WORDS",
    "DictionaryLoad",
    "DictionarySource",
    "iter_tokens",
    "load_dictionary",
    "populate",
]
