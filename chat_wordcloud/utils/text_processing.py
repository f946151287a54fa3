"""Text processing utilities for Chat Word Cloud."""

from typing import Any, Iterable, List, Pattern
import math
import re

# ASCII punctuation, full-width forms, CJK punctuation, quotes and the middle dot
PUNCTUATION_CLASS = r"""!-/:-@\[-`{-~！-／：-＠［-｀｛-～、-〜"'・"""
PUNCTUATION_ONLY = re.compile(f"^[{PUNCTUATION_CLASS}]+$")
PUNCTUATION_CHAR = re.compile(f"[{PUNCTUATION_CLASS}]")


def tokenize(text: Any) -> List[str]:
    """Split message text into tokens on runs of whitespace.

    Args:
        text: Message text; ``None``, NaN and non-string cells are tolerated

    Returns:
        List of tokens, empty for empty text
    """
    if text is None:
        return []
    if isinstance(text, float) and math.isnan(text):
        return []
    return str(text).split()


def is_punctuation_only(word: str, pattern: Pattern = PUNCTUATION_ONLY,
                        symbol: Pattern = PUNCTUATION_CHAR) -> bool:
    """Check whether a token consists only of punctuation.

    A multi-character token must be made up entirely of punctuation; a single
    character is checked against the symbol pattern on its own.

    Args:
        word: Token to check
        pattern: Whole-token punctuation pattern
        symbol: Single-symbol punctuation pattern

    Returns:
        True when the token should be treated as punctuation
    """
    if not word:
        return False
    if pattern.match(word):
        return True
    return len(word) == 1 and bool(symbol.search(word))


def contains_any(word: str, substrings: Iterable[str]) -> bool:
    """Return True if any of the substrings occurs in the word."""
    return any(sub in word for sub in substrings)

