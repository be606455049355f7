"""Prefix tree over the lowercase ASCII alphabet."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

ALPHABET = frozenset(string.ascii_lowercase)


class InvalidWordError(ValueError):
    """Raised when a word or prefix has no letters left after normalising."""

    def __init__(self, word: str) -> None:
        super().__init__(f"'{word}' contains no letters a-z")
        self.word = word


class InvalidLimitError(ValueError):
    """Raised when a suggestion limit is not a positive count."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"max_results must be positive, got {limit}")
        self.limit = limit


@dataclass(slots=True)
class TrieNode:
    children: Dict[str, "TrieNode"] = field(default_factory=dict)
    end_of_word: bool = False
    # Reserved for ranking suggestions; only ever incremented today.
    frequency: int = 0


def normalize_word(word: str) -> str:
    """Lowercase ``word`` and keep only the letters a-z."""

    return "".join(char for char in word.lower() if char in ALPHABET)


class Dictionary:
    """Word membership and bounded prefix enumeration.

    Every input goes through ``normalize_word`` first, so ``"Can't"`` and
    ``"cant"`` address the same entry. Traversals use explicit stacks rather
    than recursion, keeping deep tries safe.
    """

    def __init__(self, words: Iterable[str] = ()) -> None:
        self.root = TrieNode()
        self._size = 0
        for word in words:
            self.insert(word)

    def insert(self, word: str) -> bool:
        """Add ``word``; returns ``True`` when it was not present before."""

        key = self._require(word)
        node = self.root
        for char in key:
            node = node.children.setdefault(char, TrieNode())
        created = not node.end_of_word
        node.end_of_word = True
        node.frequency += 1
        if created:
            self._size += 1
        return created

    def contains(self, word: str) -> bool:
        node = self._walk(self._require(word))
        return node is not None and node.end_of_word

    def suggest_prefix(self, prefix: str, max_results: int = 10) -> Iterator[str]:
        """Lazily yield up to ``max_results`` words starting with ``prefix``.

        Words come out depth-first with children visited in ascending letter
        order, so a shorter word precedes its extensions. Each call returns a
        fresh iterator over the current tree.
        """

        key = self._require(prefix)
        if max_results < 1:
            raise InvalidLimitError(max_results)
        return self._enumerate(key, max_results)

    def _enumerate(self, key: str, max_results: int) -> Iterator[str]:
        start = self._walk(key)
        if start is None:
            return
        emitted = 0
        stack: List[Tuple[TrieNode, str]] = [(start, key)]
        while stack:
            node, spelled = stack.pop()
            if node.end_of_word:
                yield spelled
                emitted += 1
                if emitted >= max_results:
                    return
            for char in sorted(node.children, reverse=True):
                stack.append((node.children[char], spelled + char))

    def iter_words(self) -> Iterator[str]:
        """Every stored word in alphabetical order."""

        stack: List[Tuple[TrieNode, str]] = [(self.root, "")]
        while stack:
            node, spelled = stack.pop()
            if node.end_of_word:
                yield spelled
            for char in sorted(node.children, reverse=True):
                stack.append((node.children[char], spelled + char))

    def clear(self) -> None:
        self.root = TrieNode()
        self._size = 0

    def _walk(self, key: str) -> Optional[TrieNode]:
        node = self.root
        for char in key:
            child = node.children.get(char)
            if child is None:
                return None
            node = child
        return node

    @staticmethod
    def _require(word: str) -> str:
        key = normalize_word(word) if isinstance(word, str) else ""
        if not key:
            raise InvalidWordError(str(word))
        return key

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        key = normalize_word(word)
        node = self._walk(key) if key else None
        return node is not None and node.end_of_word

    def __len__(self) -> int:
        return self._size


__all__ = [
    "ALPHABET",
    "Dictionary",
    "InvalidLimitError",
    "InvalidWordError",
    "TrieNode",
    "normalize_word",
]
