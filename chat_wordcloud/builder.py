"""Turn aggregated word counts into display items."""

import logging
import math
import zlib
from typing import List, Mapping, Optional

from .config import CloudConfig
from .models import CloudMetadata, DisplayItem

logger = logging.getLogger(__name__)


def calculate_font_size(count: float, min_count: float, max_count: float,
                        min_size: int, max_size: int) -> int:
    """Linearly map a count onto the ``[min_size, max_size]`` pixel range.

    Args:
        count: Count of the word being sized
        min_count: Smallest count in the current set
        max_count: Largest count in the current set
        min_size: Font size for ``min_count``
        max_size: Font size for ``max_count``

    Returns:
        Integer font size, ``min_size`` when all counts are equal
    """
    if max_count == min_count:
        return min_size
    size = min_size + (count - min_count) * (max_size - min_size) / (max_count - min_count)
    return int(max(min_size, min(max_size, math.floor(size + 0.5))))


def resolve_color(word: str, word_styles: Mapping[str, str], config: CloudConfig) -> str:
    """Return the colour override for a word, or a palette colour stable per word."""
    color = word_styles.get(word)
    if color:
        return color
    if config.palette:
        return config.palette[zlib.crc32(word.encode('utf-8')) % len(config.palette)]
    return config.default_color


def build_display_items(word_counts: Mapping[str, int], word_styles: Mapping[str, str],
                        config: Optional[CloudConfig] = None) -> List[DisplayItem]:
    """Build a display item for every word in the count map.

    Font sizes are scaled between the smallest and largest count of the whole
    map. Words whose trimmed text is a single character (or empty) are left out.
    The result is sorted by count, most frequent first, and capped at
    ``config.builder_cap``.

    Args:
        word_counts: Aggregated word counts
        word_styles: Colour overrides from JSON uploads
        config: Cloud configuration

    Returns:
        List of DisplayItem
    """
    config = config or CloudConfig()
    if not word_counts:
        return []

    max_count = max(word_counts.values())
    min_count = min(word_counts.values())

    items = []
    for text, count in word_counts.items():
        if len(text.strip()) <= 1:
            continue
        items.append(DisplayItem(
            text=text,
            count=count,
            font_size=calculate_font_size(count, min_count, max_count,
                                          config.min_font_size, config.max_font_size),
            color=resolve_color(text, word_styles, config),
            weight=float(count),
        ))

    items.sort(key=lambda item: (-item.count, item.text))
    if len(items) > config.builder_cap:
        logger.debug(f"Capping {len(items)} display items to {config.builder_cap}")
        items = items[:config.builder_cap]
    return items


def build_metadata(word_counts: Mapping[str, int]) -> CloudMetadata:
    """Summarise a word count map."""
    if not word_counts:
        return CloudMetadata(max_count=0, min_count=0, total_words=0)
    return CloudMetadata(
        max_count=max(word_counts.values()),
        min_count=min(word_counts.values()),
        total_words=len(word_counts),
    )
