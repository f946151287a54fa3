"""Layout adapters that place sized words on a canvas without overlaps."""

import logging
from typing import Dict, List, Optional, Sequence

from PIL import Image, ImageDraw, ImageFont
from wordcloud import WordCloud

from .config import CloudConfig
from .models import DisplayItem, PlacedItem

logger = logging.getLogger(__name__)


class LayoutAdapter:
    """Places display items on a ``width`` x ``height`` canvas.

    Implementations may return fewer items than they were given; words that
    cannot be placed are dropped.
    """

    def place(self, items: Sequence[DisplayItem], width: int, height: int) -> List[PlacedItem]:
        raise NotImplementedError


class WordCloudLayout(LayoutAdapter):
    """Layout backed by the ``wordcloud`` package's collision-free placement.

    The requested font sizes are passed as frequencies with
    ``relative_scaling=1`` so the library keeps their proportions, shrinking
    words only when they no longer fit. The library supports horizontal and
    vertical text only: any non-zero requested rotation is treated as vertical
    when deciding the share of horizontal words.
    """

    def __init__(self, config: Optional[CloudConfig] = None):
        self.config = config or CloudConfig()
        if self.config.spiral != "archimedean":
            logger.debug(f"Spiral '{self.config.spiral}' is not used by the wordcloud placement search")

    def _prefer_horizontal(self, items: Sequence[DisplayItem]) -> float:
        horizontal = sum(1 for item in items if not item.rotation)
        return horizontal / len(items)

    def _build(self, items: Sequence[DisplayItem], width: int, height: int) -> WordCloud:
        max_size = max(item.font_size for item in items)
        return WordCloud(
            width=width,
            height=height,
            margin=self.config.padding,
            prefer_horizontal=self._prefer_horizontal(items),
            min_font_size=min(self.config.min_font_size, max_size),
            max_font_size=max_size,
            font_step=1,
            max_words=len(items),
            relative_scaling=1.0,
            background_color=self.config.background_color,
            font_path=self.config.font_path,
            random_state=self.config.random_seed,
            collocations=False,
            normalize_plurals=False,
            include_numbers=True,
        )

    def place(self, items: Sequence[DisplayItem], width: int, height: int) -> List[PlacedItem]:
        """Place items and return their centres in canvas pixels.

        Args:
            items: Display items, already filtered, sized and capped
            width: Canvas width in pixels
            height: Canvas height in pixels

        Returns:
            Placed items in the order the library placed them
        """
        if not items:
            return []

        by_text: Dict[str, DisplayItem] = {item.text: item for item in items}
        wc = self._build(items, width, height)
        wc.generate_from_frequencies({item.text: float(item.font_size) for item in items})

        measure = ImageDraw.Draw(Image.new("L", (1, 1)))
        placed = []
        for (word, _), font_size, position, orientation, _ in wc.layout_:
            if font_size is None or position is None:
                continue
            font = ImageFont.TransposedFont(
                ImageFont.truetype(wc.font_path, font_size), orientation=orientation
            )
            left, top, right, bottom = measure.textbbox((0, 0), word, font=font, anchor="lt")
            row, col = position
            placed.append(PlacedItem(
                item=by_text[word],
                x=col + (right - left) / 2.0,
                y=row + (bottom - top) / 2.0,
                font_size=int(font_size),
                rotation=0 if orientation is None else 90,
            ))

        if len(placed) < len(items):
            dropped = [text for text in by_text if text not in {p.item.text for p in placed}]
            logger.debug(f"Layout dropped {len(dropped)} words that did not fit: {', '.join(dropped[:10])}")
        return placed
