"""Interactive word cloud rendering using Plotly."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import plotly.graph_objects as go

from ..config import CloudConfig
from ..models import DisplayItem, PlacedItem
from ..utils.file_io import ensure_directory_exists

logger = logging.getLogger(__name__)

ZOOM_STEP = 1.25
MIN_SCALE = 0.1
MAX_SCALE = 3.0


def _hover_text(item: DisplayItem) -> str:
    return f"<b>{item.text}</b><br>Count: {item.count}<br>Importance: {item.importance:.2f}"


def create_cloud_figure(
    placed: Sequence[PlacedItem],
    config: Optional[CloudConfig] = None,
    title: Optional[str] = None,
    output_file: Optional[Union[str, Path]] = None,
) -> go.Figure:
    """Create a pan/zoomable word cloud figure.

    Each word is drawn as an SVG text annotation in canvas coordinates so it
    can be rotated. A transparent marker under every word carries the display
    item as ``customdata`` for hover and click events.

    Args:
        placed: Items returned by a layout adapter
        config: Cloud configuration (canvas size, colours)
        title: Optional figure title
        output_file: If provided, save the interactive HTML to this file

    Returns:
        Plotly Figure object
    """
    config = config or CloudConfig()
    try:
        annotations = [
            dict(
                x=p.x,
                y=p.y,
                xref="x",
                yref="y",
                text=p.item.text,
                showarrow=False,
                textangle=-p.rotation,
                font=dict(size=p.font_size, color=p.item.color),
                xanchor="center",
                yanchor="middle",
            )
            for p in placed
        ]

        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=[p.x for p in placed],
            y=[p.y for p in placed],
            mode="markers",
            marker=dict(
                size=[max(8, int(p.font_size * 0.9)) for p in placed],
                symbol="square",
                color=config.highlight_color,
                opacity=0,
            ),
            customdata=[p.item.to_dict() for p in placed],
            hovertext=[_hover_text(p.item) for p in placed],
            hoverinfo="text",
            hoverlabel=dict(bgcolor=config.highlight_color, font=dict(color="white", size=12)),
            name="",
        ))

        fig.update_layout(
            title=dict(text=title, x=0.5, xanchor="center") if title else None,
            annotations=annotations,
            showlegend=False,
            plot_bgcolor=config.background_color,
            paper_bgcolor=config.background_color,
            xaxis=dict(visible=False, range=[0, config.width], fixedrange=False),
            yaxis=dict(visible=False, range=[config.height, 0], scaleanchor="x", scaleratio=1),
            margin=dict(l=10, r=10, t=50 if title else 10, b=10),
            dragmode="pan",
            hovermode="closest",
            clickmode="event",
        )

        if output_file:
            ensure_directory_exists(Path(output_file).parent)
            fig.write_html(str(output_file), include_plotlyjs="cdn", config={"scrollZoom": True})
            logger.info(f"Interactive word cloud saved to {output_file}")

        return fig

    except Exception as e:
        logger.error(f"Error creating interactive word cloud: {str(e)}")
        raise


def _axis_range(figure: Dict[str, Any], axis: str, default: List[float],
                relayout_data: Optional[Dict[str, Any]] = None) -> List[float]:
    if relayout_data:
        if relayout_data.get(f"{axis}.autorange"):
            return list(default)
        start = relayout_data.get(f"{axis}.range[0]")
        end = relayout_data.get(f"{axis}.range[1]")
        if start is not None and end is not None:
            return [float(start), float(end)]
    layout_axis = figure.get("layout", {}).get(axis, {}) or {}
    value = layout_axis.get("range")
    if isinstance(value, (list, tuple)) and len(value) == 2 and None not in value:
        return [float(value[0]), float(value[1])]
    return list(default)


def zoom_figure(figure: Dict[str, Any], factor: float, config: Optional[CloudConfig] = None,
                relayout_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Zoom a figure dict around the centre of its current view.

    Args:
        figure: Figure dict as held by ``dcc.Graph``
        factor: Greater than 1 zooms in, less than 1 zooms out
        config: Cloud configuration, for the canvas size and scale limits
        relayout_data: Latest ``relayoutData`` from the graph, so pans and
            wheel zooms made in the browser are taken as the current view

    Returns:
        A new figure dict with updated axis ranges
    """
    config = config or CloudConfig()
    x0, x1 = _axis_range(figure, "xaxis", [0, config.width], relayout_data)
    y0, y1 = _axis_range(figure, "yaxis", [config.height, 0], relayout_data)

    # keep the visible span within the MIN_SCALE..MAX_SCALE limits of the canvas
    span_x = abs(x1 - x0) / factor
    span_x = min(max(span_x, config.width / MAX_SCALE), config.width / MIN_SCALE)
    ratio = span_x / abs(x1 - x0) if x1 != x0 else 1.0
    span_y = abs(y1 - y0) * ratio

    cx, cy = (x0 + x1) / 2.0, (y0 + y1) / 2.0
    new_figure = copy.deepcopy(figure)
    layout = new_figure.setdefault("layout", {})
    layout.setdefault("xaxis", {})["range"] = [cx - span_x / 2.0, cx + span_x / 2.0]
    # y runs downwards on the canvas
    layout.setdefault("yaxis", {})["range"] = [cy + span_y / 2.0, cy - span_y / 2.0]
    return new_figure


def reset_zoom(figure: Dict[str, Any], config: Optional[CloudConfig] = None) -> Dict[str, Any]:
    """Return a copy of the figure showing the whole canvas."""
    config = config or CloudConfig()
    new_figure = copy.deepcopy(figure)
    layout = new_figure.setdefault("layout", {})
    layout.setdefault("xaxis", {})["range"] = [0, config.width]
    layout.setdefault("yaxis", {})["range"] = [config.height, 0]
    return new_figure


def click_to_item(click_data: Optional[Dict[str, Any]]) -> Optional[DisplayItem]:
    """Convert a ``dcc.Graph`` clickData payload into the clicked display item."""
    if not click_data or not click_data.get("points"):
        return None
    point = click_data["points"][0]
    data = point.get("customdata")
    if not isinstance(data, dict) or "text" not in data:
        return None
    try:
        return DisplayItem.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring click with malformed item data: {e}")
        return None
