"""
Visualization module for Chat Word Cloud.
"""

from .wordcloud_plotly import (
    ZOOM_STEP,
    click_to_item,
    create_cloud_figure,
    reset_zoom,
    zoom_figure,
)
from .wordcloud_mpl import save_cloud_png

__all__ = [
    'ZOOM_STEP',
    'create_cloud_figure',
    'zoom_figure',
    'reset_zoom',
    'click_to_item',
    'save_cloud_png'
]
