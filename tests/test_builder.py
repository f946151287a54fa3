"""
Tests for building display items from word counts.
"""

import pytest

from chat_wordcloud.builder import (
    build_display_items,
    build_metadata,
    calculate_font_size,
    resolve_color,
)
from chat_wordcloud.config import CloudConfig


def test_calculate_font_size():
    """Test linear font scaling."""
    assert calculate_font_size(1, 1, 5, 12, 64) == 12
    assert calculate_font_size(5, 1, 5, 12, 64) == 64
    assert calculate_font_size(3, 1, 5, 12, 64) == 38
    # Equal counts use the minimum size
    assert calculate_font_size(7, 7, 7, 12, 64) == 12


def test_calculate_font_size_is_monotonic():
    """A higher count never gets a smaller font."""
    sizes = [calculate_font_size(count, 1, 50, 12, 64) for count in range(1, 51)]
    assert sizes == sorted(sizes)
    assert all(12 <= size <= 64 for size in sizes)


def test_build_display_items(config):
    """Test building sized, coloured and sorted items."""
    counts = {"a": 5, "ab": 3, "cd": 1, " b ": 4, "xyz": 3}
    items = build_display_items(counts, {"ab": "#ff0000"}, config)

    assert [item.text for item in items] == ["ab", "xyz", "cd"]
    by_text = {item.text: item for item in items}
    # Scaled across the whole map, including the excluded single characters
    assert by_text["ab"].font_size == 38
    assert by_text["cd"].font_size == 12
    assert by_text["ab"].color == "#ff0000"
    assert by_text["xyz"].color in config.palette
    assert by_text["ab"].count == 3
    assert by_text["ab"].weight == 3


def test_build_display_items_cap():
    """Test the builder cap keeps the most frequent words."""
    config = CloudConfig(builder_cap=2)
    items = build_display_items({"one": 1, "two": 2, "three": 3}, {}, config)
    assert [item.text for item in items] == ["three", "two"]


def test_build_display_items_empty():
    assert build_display_items({}, {}) == []


def test_resolve_color():
    """Overrides win; otherwise the palette colour is stable per word."""
    config = CloudConfig()
    assert resolve_color("定例", {"定例": "#123456"}, config) == "#123456"
    assert resolve_color("定例", {}, config) == resolve_color("定例", {}, config)
    assert resolve_color("定例", {}, config) in config.palette
    assert resolve_color("定例", {}, CloudConfig(palette=())) == config.default_color


def test_build_metadata():
    """Test summarising the count map."""
    metadata = build_metadata({"foo": 3, "bar": 1, "baz": 7})
    assert metadata.max_count == 7
    assert metadata.min_count == 1
    assert metadata.total_words == 3
    assert metadata.generated_at

    empty = build_metadata({})
    assert empty.total_words == 0
