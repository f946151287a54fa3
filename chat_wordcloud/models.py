"""Record and item types passed between the word cloud stages."""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RawMessageRecord:
    """One row of a chat-export CSV."""

    timestamp: Any
    user_id: Any
    username: Any
    message: str
    thread_ts: Optional[Any] = None


@dataclass(frozen=True)
class StyledWordRecord:
    """One entry of a pre-scored JSON word list."""

    text: str
    count: int
    color: str


@dataclass(frozen=True)
class DisplayItem:
    """A word prepared with size, colour and rotation for rendering.

    ``count`` is the aggregated count. ``weight`` is the count after emphasis
    boosting and is what the font size was derived from; ``importance`` is the
    ranking score.
    """

    text: str
    count: int
    font_size: int
    color: str
    importance: float = 0.0
    weight: float = 0.0
    rotation: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DisplayItem":
        return cls(
            text=str(data["text"]),
            count=int(data["count"]),
            font_size=int(data.get("font_size", data.get("fontSize", 0))),
            color=str(data["color"]),
            importance=float(data.get("importance", 0.0)),
            weight=float(data.get("weight", data["count"])),
            rotation=data.get("rotation"),
        )

    def to_export(self) -> Dict[str, Any]:
        """Return the ``{text, count, fontSize, color}`` export shape."""
        return {
            "text": self.text,
            "count": self.count,
            "fontSize": self.font_size,
            "color": self.color,
        }


@dataclass(frozen=True)
class PlacedItem:
    """A display item with the coordinates chosen by a layout adapter.

    ``x``/``y`` are the centre of the text in canvas pixels with the origin at
    the top-left corner. ``font_size`` may be smaller than the requested size
    when the layout had to shrink the word to fit.
    """

    item: DisplayItem
    x: float
    y: float
    font_size: int
    rotation: int = 0


@dataclass(frozen=True)
class CloudMetadata:
    """Summary of the word count map a cloud was built from."""

    max_count: int
    min_count: int
    total_words: int
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
