"""
Tests for the dashboard callback handlers.
"""

import json

import dash
import pytest
from dash.exceptions import PreventUpdate

from chat_wordcloud.config import CloudConfig
from chat_wordcloud.dashboard import (
    EXPORT_FILENAME,
    RANDOM_ROTATION_ANGLES,
    create_dashboard,
    dashboard_config,
    handle_clear,
    handle_download_cloud,
    handle_update_cloud,
    handle_upload,
    handle_word_click,
    handle_zoom,
)
from chat_wordcloud.layout import LayoutAdapter
from chat_wordcloud.models import PlacedItem
from chat_wordcloud.parsers import parse_json

MAX_BYTES = 5 * 1024 * 1024


class GridLayout(LayoutAdapter):
    """Places every item on a simple grid."""

    def place(self, items, width, height):
        return [
            PlacedItem(item=item, x=50 + 100 * (i % 10), y=50 + 100 * (i // 10), font_size=item.font_size)
            for i, item in enumerate(items)
        ]


def test_handle_upload(sample_csv_bytes, sample_json_bytes, data_url):
    """Test merging several dropped files."""
    counts, styles, alerts = handle_upload(
        [data_url(sample_csv_bytes), data_url(sample_json_bytes, "application/json")],
        ["chat.csv", "words.json"],
        {}, {}, MAX_BYTES,
    )

    assert counts["こんにちは"] == 2
    assert counts["テスト"] == 5
    assert styles["テスト"] == "#ff0000"
    assert [alert.color for alert in alerts] == ["success", "success"]


def test_handle_upload_accumulates(sample_csv_bytes, data_url):
    counts, styles, _ = handle_upload([data_url(sample_csv_bytes)], ["chat.csv"], {}, {}, MAX_BYTES)
    counts, styles, _ = handle_upload([data_url(sample_csv_bytes)], ["chat.csv"], counts, styles, MAX_BYTES)
    assert counts["こんにちは"] == 4


def test_handle_upload_single_file(sample_csv_bytes, data_url):
    counts, _, alerts = handle_upload(data_url(sample_csv_bytes), "chat.csv", None, None, MAX_BYTES)
    assert counts["世界"] == 1
    assert len(alerts) == 1


def test_handle_upload_failures_keep_state(sample_csv_bytes, data_url):
    """Failed files get a danger alert and leave the maps unchanged."""
    existing = {"定例": 3}
    counts, styles, alerts = handle_upload(
        [data_url(b"hello", "text/plain"), data_url(sample_csv_bytes), "garbage"],
        ["notes.txt", "big.csv", "broken.csv"],
        existing, {}, 10,
    )

    assert counts == {"定例": 3}
    assert styles == {}
    assert [alert.color for alert in alerts] == ["danger", "danger", "danger"]
    assert "notes.txt" in alerts[0].children


def test_handle_upload_no_contents():
    with pytest.raises(PreventUpdate):
        handle_upload(None, None, {}, {}, MAX_BYTES)


def test_handle_clear():
    with pytest.raises(PreventUpdate):
        handle_clear(None)

    counts, styles, alert, selected = handle_clear(1)
    assert counts == {}
    assert styles == {}
    assert selected is None


def test_dashboard_config():
    """Test applying the settings controls."""
    base = CloudConfig()
    config = dashboard_config(base, [40, 20], "fixed")
    assert config.min_font_size == 20
    assert config.max_font_size == 40
    assert config.rotation_angles == (0,)
    assert config.rotation_random is False

    config = dashboard_config(base, None, "random")
    assert config.rotation_random is True
    assert config.min_font_size == base.min_font_size


def test_dashboard_config_keeps_configured_angles():
    """Random rotation uses the configured angles when they include a rotation."""
    base = CloudConfig()
    assert dashboard_config(base, [12, 64], "random").rotation_angles == base.rotation_angles

    custom = CloudConfig(rotation_angles=(0, 90, 90))
    assert dashboard_config(custom, None, "random").rotation_angles == (0, 90, 90)

    horizontal = CloudConfig(rotation_angles=(0,))
    assert dashboard_config(horizontal, None, "random").rotation_angles == RANDOM_ROTATION_ANGLES


def test_handle_update_cloud(policy):
    """Test rebuilding the figure from the stores."""
    config = CloudConfig(random_seed=1)
    counts = {"こんにちは": 2, "世界": 1, "の": 9, "定例": 4}
    figure, items, summary = handle_update_cloud(counts, {}, config, policy, layout=GridLayout())

    assert {item["text"] for item in items} == {"こんにちは", "世界", "定例"}
    assert len(figure.layout.annotations) == 3
    assert "4 distinct words" in summary


def test_handle_update_cloud_empty(policy):
    config = CloudConfig()
    figure, items, summary = handle_update_cloud({}, {}, config, policy, layout=GridLayout())
    assert items == []
    assert summary == "No data loaded."
    assert len(figure.layout.annotations) == 1

    figure, items, summary = handle_update_cloud({"の": 3}, {}, config, policy, layout=GridLayout())
    assert items == []


def test_handle_zoom(placed_items):
    """Test the zoom buttons."""
    from chat_wordcloud.visualization import create_cloud_figure

    config = CloudConfig()
    figure = create_cloud_figure(placed_items, config).to_dict()

    zoomed = handle_zoom("zoom-in-button", figure, None, config)
    x0, x1 = zoomed["layout"]["xaxis"]["range"]
    assert x1 - x0 < config.width

    zoomed_out = handle_zoom("zoom-out-button", figure, None, config)
    x0, x1 = zoomed_out["layout"]["xaxis"]["range"]
    assert x1 - x0 > config.width

    reset = handle_zoom("zoom-reset-button", zoomed, None, config)
    assert reset["layout"]["xaxis"]["range"] == [0, config.width]

    with pytest.raises(PreventUpdate):
        handle_zoom(None, figure, None, config)
    with pytest.raises(PreventUpdate):
        handle_zoom("zoom-in-button", None, None, config)


def test_handle_word_click(sample_items):
    alert = handle_word_click({"points": [{"customdata": sample_items[0].to_dict()}]})
    assert alert.children[0].children == "meeting"
    assert "10 occurrences" in alert.children[1].children

    with pytest.raises(PreventUpdate):
        handle_word_click(None)


def test_handle_download_cloud(sample_items):
    """The download can be uploaded again."""
    with pytest.raises(PreventUpdate):
        handle_download_cloud(None, [item.to_dict() for item in sample_items], {})
    with pytest.raises(PreventUpdate):
        handle_download_cloud(1, [], {})

    result = handle_download_cloud(1, [item.to_dict() for item in sample_items], {"meeting": 10, "agenda": 6})
    assert result["filename"] == EXPORT_FILENAME

    document = json.loads(result["content"])
    assert document["items"][0] == {"text": "meeting", "count": 10, "fontSize": 64, "color": "#2563eb"}
    assert document["metadata"]["total_words"] == 2
    records = parse_json(result["content"].encode("utf-8"))
    assert [r.text for r in records] == ["meeting", "agenda", "review"]


def test_create_dashboard(policy):
    """Test building the app and its layout."""
    app = create_dashboard(config=CloudConfig(), policy=policy)
    assert isinstance(app, dash.Dash)
    assert app.layout is not None
    assert len(app.callback_map) >= 5


def _find_component(component, component_id):
    if getattr(component, "id", None) == component_id:
        return component
    children = getattr(component, "children", None)
    if not isinstance(children, (list, tuple)):
        children = [children]
    for child in children:
        if child is not None and not isinstance(child, str):
            found = _find_component(child, component_id)
            if found is not None:
                return found
    return None


def test_upload_size_checked_by_server(policy):
    """Oversized files reach the upload callback so the size alert is shown."""
    app = create_dashboard(config=CloudConfig(), policy=policy)
    upload = _find_component(app.layout, "upload-files")
    assert upload is not None
    assert getattr(upload, "max_size", -1) == -1
    assert _find_component(app.layout, "spiral-select") is None
