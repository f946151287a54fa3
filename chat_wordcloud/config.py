"""Configuration for building and rendering word clouds."""

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "WORDCLOUD_"
SPIRALS = ("archimedean", "rectangular")

DEFAULT_PALETTE = [
    '#2563eb', '#3b82f6', '#60a5fa', '#93c5fd', '#bfdbfe',
    '#1d4ed8', '#2563eb', '#3b82f6', '#60a5fa', '#93c5fd'
]


@dataclass(frozen=True)
class CloudConfig:
    """Settings consumed by the builder, policy, layout and render stages."""

    min_font_size: int = 12
    max_font_size: int = 64
    padding: int = 3
    spiral: str = "archimedean"
    # 0 listed more often so most words stay horizontal
    rotation_angles: Tuple[int, ...] = (0, 0, 0, 90)
    rotation_random: bool = True
    palette: Tuple[str, ...] = tuple(DEFAULT_PALETTE)
    default_color: str = "#2563eb"
    highlight_color: str = "#1e40af"
    background_color: str = "#ffffff"
    width: int = 1200
    height: int = 800
    max_words: int = 50
    builder_cap: int = 100
    min_count: int = 1
    font_path: Optional[str] = None
    random_seed: Optional[int] = None
    max_upload_bytes: int = 5 * 1024 * 1024

    def replace(self, **overrides: Any) -> "CloudConfig":
        """Return a copy with the given fields replaced, skipping ``None`` values."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        for key in ("rotation_angles", "palette"):
            if key in changes:
                changes[key] = tuple(changes[key])
        config = dataclasses.replace(self, **changes)
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ``ValueError`` when the settings are inconsistent."""
        if self.min_font_size <= 0:
            raise ValueError(f"min_font_size must be positive, got {self.min_font_size}")
        if self.max_font_size < self.min_font_size:
            raise ValueError(
                f"max_font_size ({self.max_font_size}) must be >= min_font_size ({self.min_font_size})"
            )
        if self.spiral not in SPIRALS:
            raise ValueError(f"spiral must be one of {', '.join(SPIRALS)}, got {self.spiral!r}")
        if not self.rotation_angles:
            raise ValueError("rotation_angles must not be empty")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"canvas size must be positive, got {self.width}x{self.height}")
        if self.max_words <= 0 or self.builder_cap <= 0:
            raise ValueError("max_words and builder_cap must be positive")
        if self.padding < 0:
            raise ValueError(f"padding must not be negative, got {self.padding}")

    def to_dict(self) -> Dict[str, Any]:
        data = dataclasses.asdict(self)
        data["rotation_angles"] = list(self.rotation_angles)
        data["palette"] = list(self.palette)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CloudConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        return cls().replace(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_env(cls, env: Optional[Dict[str, str]] = None) -> "CloudConfig":
        """Build a config from ``WORDCLOUD_*`` environment variables.

        Values in a ``.env`` file are loaded first when reading from
        ``os.environ``. Lists are comma separated, booleans accept
        ``1/true/yes/on``.

        Args:
            env: Mapping to read instead of ``os.environ``

        Returns:
            CloudConfig with the environment overrides applied
        """
        if env is None:
            load_dotenv()
            env = dict(os.environ)

        overrides: Dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            try:
                overrides[f.name] = _coerce(f.name, raw, f.default)
            except ValueError as e:
                raise ValueError(f"Invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r} ({e})")

        if overrides:
            logger.debug(f"Configuration overrides from environment: {sorted(overrides)}")
        return cls().replace(**overrides)


def _coerce(name: str, raw: str, default: Any) -> Any:
    raw = raw.strip()
    if name == "rotation_angles":
        return tuple(int(part) for part in raw.split(",") if part.strip())
    if name == "palette":
        return tuple(part.strip() for part in raw.split(",") if part.strip())
    if isinstance(default, bool):
        return raw.lower() in ("1", "true", "yes", "on")
    if isinstance(default, int) or name == "random_seed":
        return int(raw)
    return raw
