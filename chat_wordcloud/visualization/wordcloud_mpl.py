"""Static word cloud rendering using Matplotlib."""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import matplotlib

# Use the 'Agg' backend so rendering works without a display
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.font_manager import FontProperties

from ..config import CloudConfig
from ..models import PlacedItem
from ..utils.file_io import ensure_directory_exists

logger = logging.getLogger(__name__)


def save_cloud_png(
    placed: Sequence[PlacedItem],
    output_file: Union[str, Path],
    config: Optional[CloudConfig] = None,
    dpi: int = 100,
) -> str:
    """Render placed words to a PNG image.

    Args:
        placed: Items returned by a layout adapter
        output_file: Path of the PNG to write
        config: Cloud configuration (canvas size, colours, font)
        dpi: Output resolution; font sizes are converted from pixels

    Returns:
        Path to the saved file
    """
    config = config or CloudConfig()
    text_kwargs = {}
    if config.font_path:
        text_kwargs["fontproperties"] = FontProperties(fname=config.font_path)

    try:
        fig = plt.figure(figsize=(config.width / dpi, config.height / dpi), dpi=dpi)
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, config.width)
        ax.set_ylim(config.height, 0)
        ax.axis("off")
        fig.patch.set_facecolor(config.background_color)

        for p in placed:
            ax.text(
                p.x,
                p.y,
                p.item.text,
                fontsize=p.font_size * 72.0 / dpi,
                color=p.item.color,
                rotation=p.rotation,
                ha="center",
                va="center",
                **text_kwargs,
            )

        ensure_directory_exists(Path(output_file).parent)
        fig.savefig(output_file, dpi=dpi, facecolor=config.background_color)
        plt.close(fig)
        logger.info(f"Word cloud image saved to {output_file}")
        return str(output_file)

    except Exception as e:
        logger.error(f"Error creating word cloud image: {str(e)}")
        raise
