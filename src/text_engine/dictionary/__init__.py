"""Prefix-tree dictionary used for spell-checking and suggestions."""

from .trie import (
    ALPHABET,
    Dictionary,
    InvalidLimitError,
    InvalidWordError,
    TrieNode,
    normalize_word,
)
from .wordlist import (
    BUILTIN_WORDS,
    DictionaryLoad,
    iter_tokens,
    load_dictionary,
    populate,
)

__all__ = [
    "ALPHABET",
    "Dictionary",
    "InvalidLimitError",
    "InvalidWordError",
    "TrieNode",
    "normalize_word",
    "BUILTIN_WORDS",
    "DictionaryLoad",
    "iter_tokens",
    "load_dictionary",
    "populate",
]
