"""Filtering, emphasis and ranking policy for word cloud items.

The word lists are data, not code: they are read from a YAML file so a
deployment can swap the stoplist, bot phrases and emphasis table for its own
community without touching the layout or rendering code.
"""

import dataclasses
import logging
import math
import random
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import numpy as np
import yaml

from .builder import build_display_items, calculate_font_size
from .config import CloudConfig
from .models import DisplayItem
from .utils.text_processing import PUNCTUATION_CLASS, contains_any, is_punctuation_only

logger = logging.getLogger(__name__)

DEFAULT_POLICY_PATH = Path(__file__).parent / "data" / "default_policy.yaml"


class FilterPolicy:
    """Decides which words are shown, how strongly and in what order."""

    def __init__(
        self,
        stopwords: Optional[Iterable[str]] = None,
        bot_patterns: Optional[Iterable[str]] = None,
        emphasis: Optional[Mapping[str, float]] = None,
        length_boost_range: tuple = (3, 4),
        length_boost: float = 1.5,
        punctuation: str = PUNCTUATION_CLASS,
        min_length: int = 2,
    ):
        """Initialize the policy.

        Args:
            stopwords: Tokens excluded on exact match
            bot_patterns: Substrings that exclude any token containing them
            emphasis: Word to count multiplier
            length_boost_range: Inclusive (min, max) word length receiving ``length_boost``
            length_boost: Multiplier for words in ``length_boost_range``
            punctuation: Regex character class of punctuation characters
            min_length: Minimum trimmed word length
        """
        self.stopwords = frozenset(stopwords or ())
        self.bot_patterns = tuple(bot_patterns or ())
        self.emphasis_table = dict(emphasis or {})
        self.length_boost_range = tuple(length_boost_range)
        self.length_boost = float(length_boost)
        self.min_length = min_length
        self.punctuation_only = re.compile(f"^[{punctuation}]+$")
        self.punctuation_char = re.compile(f"[{punctuation}]")

    def should_include(self, word: str) -> bool:
        """Return False for noise tokens: too short, stoplisted, bot text or punctuation."""
        text = word.strip()
        if len(text) < self.min_length:
            return False
        if text in self.stopwords:
            return False
        if contains_any(text, self.bot_patterns):
            return False
        if is_punctuation_only(text, self.punctuation_only, self.punctuation_char):
            return False
        return True

    @staticmethod
    def importance(word: str, count: float) -> float:
        """Ranking score: a length weight times ``log10(count + 1)``."""
        length = len(word)
        if length < 2:
            length_weight = 0.5
        elif length < 3:
            length_weight = 0.8
        else:
            length_weight = 1.0
        return float(length_weight * np.log10(count + 1))

    def emphasis(self, word: str) -> float:
        """Count multiplier for a word: emphasis table entry times the length boost."""
        multiplier = self.emphasis_table.get(word, 1.0)
        low, high = self.length_boost_range
        if low <= len(word) <= high:
            multiplier *= self.length_boost
        return multiplier

    def apply(self, items: Iterable[DisplayItem], config: Optional[CloudConfig] = None,
              rng: Optional[random.Random] = None) -> List[DisplayItem]:
        """Filter, weight, rank and cap display items.

        Font sizes are recomputed from the emphasised weights; the ``count``
        of every item is left as aggregated.

        Args:
            items: Display items from the builder
            config: Cloud configuration (caps, font range, rotation)
            rng: Random source for rotation; seeded from ``config.random_seed`` if omitted

        Returns:
            At most ``config.max_words`` items, most important first
        """
        config = config or CloudConfig()
        rng = rng or random.Random(config.random_seed)

        candidates: Dict[str, DisplayItem] = {}
        dropped = 0
        for item in items:
            text = item.text.strip()
            if not self.should_include(text) or item.count < config.min_count:
                dropped += 1
                continue
            if text in candidates:
                continue
            candidates[text] = dataclasses.replace(
                item, text=text, weight=item.count * self.emphasis(text)
            )
        if dropped:
            logger.debug(f"Policy dropped {dropped} items")
        if not candidates:
            return []

        weights = [item.weight for item in candidates.values()]
        min_weight, max_weight = min(weights), max(weights)
        scored = [
            dataclasses.replace(
                item,
                font_size=calculate_font_size(item.weight, min_weight, max_weight,
                                              config.min_font_size, config.max_font_size),
                importance=self.importance(item.text, item.weight),
            )
            for item in candidates.values()
        ]
        scored.sort(key=lambda item: (-item.importance, -item.weight, item.text))
        scored = scored[:config.max_words]

        angles = list(config.rotation_angles)
        result = []
        for i, item in enumerate(scored):
            rotation = rng.choice(angles) if config.rotation_random else angles[i % len(angles)]
            result.append(dataclasses.replace(item, rotation=rotation))
        return result

    def to_dict(self) -> Dict[str, Any]:
        low, high = self.length_boost_range
        return {
            'stopwords': sorted(self.stopwords),
            'bot_patterns': list(self.bot_patterns),
            'emphasis': dict(self.emphasis_table),
            'length_boost': {'min_length': low, 'max_length': high, 'multiplier': self.length_boost},
        }

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "FilterPolicy":
        """Build a policy from a parsed YAML mapping.

        Raises:
            ValueError: if a section has the wrong shape
        """
        if not isinstance(config, Mapping):
            raise ValueError("Policy must be a mapping")

        for key in ('stopwords', 'bot_patterns'):
            value = config.get(key) or []
            if not isinstance(value, list):
                raise ValueError(f"Policy field '{key}' must be a list")

        emphasis = config.get('emphasis') or {}
        if not isinstance(emphasis, Mapping):
            raise ValueError("Policy field 'emphasis' must be a mapping of word to multiplier")
        try:
            emphasis = {str(word): float(multiplier) for word, multiplier in emphasis.items()}
        except (TypeError, ValueError):
            raise ValueError("Policy 'emphasis' multipliers must be numbers")
        if any(not math.isfinite(m) or m <= 0 for m in emphasis.values()):
            raise ValueError("Policy 'emphasis' multipliers must be positive")

        boost = config.get('length_boost') or {}
        if not isinstance(boost, Mapping):
            raise ValueError("Policy field 'length_boost' must be a mapping")

        kwargs: Dict[str, Any] = {
            'stopwords': [str(word) for word in config.get('stopwords') or []],
            'bot_patterns': [str(pattern) for pattern in config.get('bot_patterns') or []],
            'emphasis': emphasis,
            'length_boost_range': (int(boost.get('min_length', 3)), int(boost.get('max_length', 4))),
            'length_boost': float(boost.get('multiplier', 1.5)),
        }
        if config.get('punctuation'):
            kwargs['punctuation'] = str(config['punctuation'])
        return cls(**kwargs)


def load_policy(policy_path: Union[str, Path]) -> FilterPolicy:
    """Load a filter policy from a YAML file.

    Args:
        policy_path: Path to the policy YAML

    Returns:
        FilterPolicy
    """
    policy_path = Path(policy_path)
    if not policy_path.exists():
        raise FileNotFoundError(f"Policy file not found: {policy_path}")

    with open(policy_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f) or {}

    policy = FilterPolicy.from_dict(config)
    logger.info(
        f"Loaded policy from {policy_path}: {len(policy.stopwords)} stopwords, "
        f"{len(policy.bot_patterns)} bot patterns, {len(policy.emphasis_table)} emphasis words"
    )
    return policy


def default_policy() -> FilterPolicy:
    """Load the policy bundled with the package."""
    return load_policy(DEFAULT_POLICY_PATH)


def prepare_cloud(word_counts: Mapping[str, int], word_styles: Mapping[str, str],
                  config: Optional[CloudConfig] = None, policy: Optional[FilterPolicy] = None,
                  rng: Optional[random.Random] = None) -> List[DisplayItem]:
    """Build, filter, rank and cap the display items for the current maps.

    Noise words are removed before the builder cap so they cannot crowd out
    real words; the policy then applies the final ``max_words`` cap.

    Args:
        word_counts: Aggregated word counts
        word_styles: Colour overrides
        config: Cloud configuration
        policy: Filter policy, the bundled default if omitted
        rng: Random source for rotation

    Returns:
        Ranked display items ready for layout
    """
    config = config or CloudConfig()
    policy = policy or default_policy()
    kept = {word: count for word, count in word_counts.items() if policy.should_include(word)}
    items = build_display_items(kept, word_styles, config)
    return policy.apply(items, config, rng=rng)
