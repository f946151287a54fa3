"""
Tests for text processing utilities.
"""

import pytest

from chat_wordcloud.utils.text_processing import (
    contains_any,
    is_punctuation_only,
    tokenize,
)


def test_tokenize():
    """Test whitespace tokenization."""
    assert tokenize("こんにちは 世界 こんにちは") == ["こんにちは", "世界", "こんにちは"]
    assert tokenize("  spaced\tout\nwords  ") == ["spaced", "out", "words"]
    # Ideographic spaces separate tokens too
    assert tokenize("定例　確認") == ["定例", "確認"]
    assert tokenize("") == []
    assert tokenize(None) == []
    assert tokenize(float("nan")) == []
    assert tokenize(42) == ["42"]


@pytest.mark.parametrize("word, expected", [
    ("!!!", True),
    ("...", True),
    ("！？", True),
    ("、", True),
    ("「」", True),
    ("・", True),
    ("a", False),
    ("始めます！", False),
    ("C++", False),
    ("", False),
])
def test_is_punctuation_only(word, expected):
    assert is_punctuation_only(word) is expected


def test_contains_any():
    assert contains_any("https://example.com", ["http"])
    assert not contains_any("定例", ["http", "doc"])
    assert not contains_any("anything", [])
