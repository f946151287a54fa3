"""Interactive dashboard for Chat Word Cloud."""
import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Tuple

import dash
import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from dash import dcc, html, Input, Output, State, ctx
from dash.exceptions import PreventUpdate

from .aggregator import apply_upload
from .builder import build_metadata
from .config import CloudConfig
from .errors import WordCloudError
from .layout import LayoutAdapter, WordCloudLayout
from .models import DisplayItem
from .parsers import decode_data_url, load_upload
from .policy import FilterPolicy, default_policy, prepare_cloud
from .utils.file_io import cloud_to_json
from .visualization import ZOOM_STEP, click_to_item, create_cloud_figure, reset_zoom, zoom_figure

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# Used by the "random" rotation control when the configured angles are all horizontal
RANDOM_ROTATION_ANGLES = (0, 0, 0, 90)
FIXED_ROTATION_ANGLES = (0,)
FONT_SIZE_LIMITS = (8, 120)
EXPORT_FILENAME = "wordcloud.json"


def handle_upload(contents: Optional[Sequence[str]], filenames: Optional[Sequence[str]],
                  word_counts: Optional[Dict[str, int]], word_styles: Optional[Dict[str, str]],
                  max_bytes: int) -> Tuple[Dict[str, int], Dict[str, str], List[Any]]:
    """Merge every dropped file into the word maps, in drop order.

    A file that fails leaves the maps as the previous files left them and
    gets its own danger alert; the remaining files are still processed.

    Args:
        contents: Base64 data URLs from ``dcc.Upload``
        filenames: Names matching ``contents``
        word_counts: Current word count store
        word_styles: Current word style store
        max_bytes: Upload size limit

    Returns:
        Tuple of (word counts, word styles, status alerts)
    """
    if not contents or not filenames:
        raise PreventUpdate

    # dcc.Upload sends scalars when multiple=False
    if isinstance(contents, str):
        contents, filenames = [contents], [filenames]

    counts = dict(word_counts or {})
    styles = dict(word_styles or {})
    alerts = []
    for content, filename in zip(contents, filenames):
        try:
            data = decode_data_url(content, filename=filename)
            upload = load_upload(filename, data, max_bytes=max_bytes)
        except WordCloudError as e:
            logger.error(f"Upload failed for {filename}: {e.message}")
            alerts.append(dbc.Alert(f"{filename}: {e.message}", color="danger", dismissable=True))
            continue

        counts, styles = apply_upload(counts, styles, upload)
        noun = "messages" if upload.kind == 'csv' else "words"
        logger.info(f"Merged {filename}: {len(upload.records)} {noun}, {len(counts)} distinct words")
        alerts.append(dbc.Alert(
            f"{filename}: loaded {len(upload.records)} {noun}.",
            color="success",
            dismissable=True,
        ))
    return counts, styles, alerts


def handle_clear(n_clicks: Optional[int]) -> Tuple[Dict[str, int], Dict[str, str], Any, Any]:
    """Forget all uploaded data."""
    if not n_clicks:
        raise PreventUpdate
    logger.info("Cleared word cloud data")
    return {}, {}, dbc.Alert("Data cleared.", color="secondary", dismissable=True), None


def dashboard_config(base: CloudConfig, font_range: Optional[Sequence[int]],
                     rotation_mode: Optional[str]) -> CloudConfig:
    """Apply the dashboard control values to a base configuration.

    Args:
        base: Configuration the dashboard was started with
        font_range: ``[min, max]`` from the font size slider
        rotation_mode: ``'fixed'`` or ``'random'``; random keeps the configured
            angles unless they are all horizontal

    Returns:
        CloudConfig with the controls applied
    """
    overrides: Dict[str, Any] = {}
    if font_range and len(font_range) == 2:
        overrides['min_font_size'] = int(min(font_range))
        overrides['max_font_size'] = int(max(font_range))
    if rotation_mode == 'fixed':
        overrides['rotation_angles'] = FIXED_ROTATION_ANGLES
        overrides['rotation_random'] = False
    elif rotation_mode == 'random':
        if not any(base.rotation_angles):
            overrides['rotation_angles'] = RANDOM_ROTATION_ANGLES
        overrides['rotation_random'] = True
    return base.replace(**overrides)


def empty_figure(config: CloudConfig) -> go.Figure:
    """Blank canvas shown before anything is uploaded."""
    fig = create_cloud_figure([], config)
    fig.add_annotation(
        x=config.width / 2,
        y=config.height / 2,
        text="Drop chat-export CSV or word list JSON files to build a word cloud",
        showarrow=False,
        font=dict(size=16, color="#6c757d"),
    )
    return fig


def handle_update_cloud(word_counts: Optional[Dict[str, int]], word_styles: Optional[Dict[str, str]],
                        config: CloudConfig, policy: FilterPolicy,
                        layout: Optional[LayoutAdapter] = None) -> Tuple[go.Figure, List[Dict[str, Any]], str]:
    """Rebuild the cloud from the current maps.

    Args:
        word_counts: Word count store
        word_styles: Word style store
        config: Configuration with the dashboard controls applied
        policy: Filter policy
        layout: Layout adapter, a WordCloudLayout for ``config`` if omitted

    Returns:
        Tuple of (figure, placed display items as dicts, summary text)
    """
    if not word_counts:
        return empty_figure(config), [], "No data loaded."

    items = prepare_cloud(word_counts, word_styles or {}, config, policy)
    layout = layout or WordCloudLayout(config)
    placed = layout.place(items, config.width, config.height)
    if not placed:
        return empty_figure(config), [], f"{len(word_counts)} distinct words; nothing left to show after filtering."

    figure = create_cloud_figure(placed, config)
    summary = f"{len(word_counts)} distinct words; showing {len(placed)}."
    return figure, [p.item.to_dict() for p in placed], summary


def handle_zoom(trigger: Optional[str], figure: Optional[Dict[str, Any]],
                relayout_data: Optional[Dict[str, Any]], config: CloudConfig) -> Dict[str, Any]:
    """Apply a zoom button press to the current figure.

    Args:
        trigger: Id of the button that fired
        figure: Current figure dict from the graph
        relayout_data: Latest pan/zoom state from the graph
        config: Cloud configuration

    Returns:
        Updated figure dict
    """
    if not figure or trigger is None:
        raise PreventUpdate
    if trigger == 'zoom-in-button':
        return zoom_figure(figure, ZOOM_STEP, config, relayout_data)
    if trigger == 'zoom-out-button':
        return zoom_figure(figure, 1 / ZOOM_STEP, config, relayout_data)
    if trigger == 'zoom-reset-button':
        return reset_zoom(figure, config)
    raise PreventUpdate


def handle_word_click(click_data: Optional[Dict[str, Any]]) -> Any:
    """Show the clicked word and its count."""
    item = click_to_item(click_data)
    if item is None:
        raise PreventUpdate
    logger.debug(f"Word clicked: {item.text}")
    return dbc.Alert(
        [
            html.Strong(item.text, style={"color": item.color}),
            html.Span(f": {item.count} occurrences"),
        ],
        color="info",
        className="mb-0",
    )


def handle_download_cloud(n_clicks: Optional[int], items_data: Optional[List[Dict[str, Any]]],
                          word_counts: Optional[Dict[str, int]]) -> Dict[str, str]:
    """Export the displayed items as JSON that can be uploaded again."""
    if not n_clicks or not items_data:
        raise PreventUpdate
    items = [DisplayItem.from_dict(data) for data in items_data]
    content = cloud_to_json(items, build_metadata(word_counts or {}))
    return dict(content=content, filename=EXPORT_FILENAME)


def _controls(config: CloudConfig) -> dbc.Card:
    return dbc.Card([
        dbc.CardHeader("Settings"),
        dbc.CardBody([
            html.Label("Font size (px)", className="fw-bold"),
            dcc.RangeSlider(
                id='font-size-slider',
                min=FONT_SIZE_LIMITS[0],
                max=FONT_SIZE_LIMITS[1],
                step=1,
                value=[config.min_font_size, config.max_font_size],
                marks={size: str(size) for size in (8, 12, 32, 64, 96, 120)},
                tooltip={"placement": "bottom"},
                className="mb-3",
            ),
            html.Label("Rotation", className="fw-bold"),
            dbc.RadioItems(
                id='rotation-mode',
                options=[
                    {"label": "Horizontal", "value": "fixed"},
                    {"label": "Random", "value": "random"},
                ],
                value="random" if config.rotation_random else "fixed",
                inline=True,
                className="mb-0",
            ),
        ]),
    ], className="mb-3")


def create_dashboard(debug: bool = False, port: int = 8050,
                     config: Optional[CloudConfig] = None,
                     policy: Optional[FilterPolicy] = None) -> dash.Dash:
    """Create and configure the Dash application.

    Args:
        debug: Whether to run in debug mode
        port: Port to run the dashboard on
        config: Base configuration, read from the environment if omitted
        policy: Filter policy, the bundled default if omitted

    Returns:
        Configured Dash application
    """
    config = config or CloudConfig.from_env()
    policy = policy or default_policy()

    app = dash.Dash(
        __name__,
        external_stylesheets=[dbc.themes.BOOTSTRAP],
        suppress_callback_exceptions=True,
        title="Chat Word Cloud",
        update_title=None
    )

    app.layout = html.Div([
        # Session state lives in the browser tab only
        dcc.Store(id='word-counts-store', storage_type='memory', data={}),
        dcc.Store(id='word-styles-store', storage_type='memory', data={}),
        dcc.Store(id='cloud-items-store', storage_type='memory', data=[]),
        dcc.Download(id='download-cloud'),

        dbc.NavbarSimple(
            brand="Chat Word Cloud",
            brand_href="#",
            color="primary",
            dark=True,
            fluid=True,
        ),

        dbc.Container(fluid=True, className="py-4", children=[
            dbc.Row([
                dbc.Col(md=3, children=[
                    dbc.Card([
                        dbc.CardHeader("Upload"),
                        dbc.CardBody([
                            dcc.Upload(
                                id='upload-files',
                                children=html.Div([
                                    'Drag and Drop or ',
                                    html.A('Select Files'),
                                    html.Div(".csv or .json, up to "
                                             f"{config.max_upload_bytes // (1024 * 1024)} MB",
                                             className="small text-muted"),
                                ]),
                                style={
                                    'width': '100%',
                                    'borderWidth': '1px',
                                    'borderStyle': 'dashed',
                                    'borderRadius': '5px',
                                    'textAlign': 'center',
                                    'padding': '20px 0',
                                },
                                accept='.csv,.json',
                                multiple=True,
                            ),
                            html.Div(id='upload-status', className="mt-3"),
                            dbc.Button("Clear data", id='clear-button', color="danger", outline=True,
                                       size="sm", className="mt-2"),
                        ]),
                    ], className="mb-3"),
                    _controls(config),
                    html.Div(id='selected-word'),
                ]),
                dbc.Col(md=9, children=[
                    dbc.Card([
                        dbc.CardHeader(dbc.Row([
                            dbc.Col(html.Span(id='cloud-summary', children="No data loaded."),
                                    className="align-self-center"),
                            dbc.Col(dbc.ButtonGroup([
                                dbc.Button("+", id='zoom-in-button', color="secondary", size="sm"),
                                dbc.Button("−", id='zoom-out-button', color="secondary", size="sm"),
                                dbc.Button("Reset", id='zoom-reset-button', color="secondary", size="sm"),
                                dbc.Button("Download JSON", id='download-button', color="primary", size="sm"),
                            ]), width="auto"),
                        ], justify="between")),
                        dbc.CardBody([
                            dcc.Loading(dcc.Graph(
                                id='wordcloud-graph',
                                figure=empty_figure(config),
                                config={'scrollZoom': True, 'displaylogo': False},
                                style={'height': f'{config.height}px'},
                            )),
                        ]),
                    ]),
                ]),
            ]),
        ]),
    ])

    register_callbacks(app, config, policy)
    return app


def register_callbacks(app: dash.Dash, config: CloudConfig, policy: FilterPolicy) -> None:
    """Register all Dash callbacks.

    Args:
        app: Dash application
        config: Base configuration
        policy: Filter policy
    """
    @app.callback(
        [Output('word-counts-store', 'data'),
         Output('word-styles-store', 'data'),
         Output('upload-status', 'children')],
        [Input('upload-files', 'contents')],
        [State('upload-files', 'filename'),
         State('word-counts-store', 'data'),
         State('word-styles-store', 'data')],
        prevent_initial_call=True
    )
    def upload_files(contents, filenames, word_counts, word_styles):
        """Merge dropped files into the stores."""
        return handle_upload(contents, filenames, word_counts, word_styles, config.max_upload_bytes)

    @app.callback(
        [Output('word-counts-store', 'data', allow_duplicate=True),
         Output('word-styles-store', 'data', allow_duplicate=True),
         Output('upload-status', 'children', allow_duplicate=True),
         Output('selected-word', 'children')],
        [Input('clear-button', 'n_clicks')],
        prevent_initial_call=True
    )
    def clear_data(n_clicks):
        return handle_clear(n_clicks)

    @app.callback(
        [Output('wordcloud-graph', 'figure'),
         Output('cloud-items-store', 'data'),
         Output('cloud-summary', 'children')],
        [Input('word-counts-store', 'data'),
         Input('word-styles-store', 'data'),
         Input('font-size-slider', 'value'),
         Input('rotation-mode', 'value')]
    )
    def update_cloud(word_counts, word_styles, font_range, rotation_mode):
        """Rebuild the cloud whenever the data or the settings change."""
        try:
            current = dashboard_config(config, font_range, rotation_mode)
        except ValueError as e:
            logger.warning(f"Ignoring invalid dashboard settings: {e}")
            current = config
        return handle_update_cloud(word_counts, word_styles, current, policy)

    @app.callback(
        Output('wordcloud-graph', 'figure', allow_duplicate=True),
        [Input('zoom-in-button', 'n_clicks'),
         Input('zoom-out-button', 'n_clicks'),
         Input('zoom-reset-button', 'n_clicks')],
        [State('wordcloud-graph', 'figure'),
         State('wordcloud-graph', 'relayoutData')],
        prevent_initial_call=True
    )
    def zoom(zoom_in, zoom_out, zoom_reset, figure, relayout_data):
        return handle_zoom(ctx.triggered_id, figure, relayout_data, config)

    @app.callback(
        Output('selected-word', 'children', allow_duplicate=True),
        [Input('wordcloud-graph', 'clickData')],
        prevent_initial_call=True
    )
    def show_selected_word(click_data):
        return handle_word_click(click_data)

    @app.callback(
        Output('download-cloud', 'data'),
        [Input('download-button', 'n_clicks')],
        [State('cloud-items-store', 'data'),
         State('word-counts-store', 'data')],
        prevent_initial_call=True
    )
    def download_cloud(n_clicks, items_data, word_counts):
        return handle_download_cloud(n_clicks, items_data, word_counts)


def run_dashboard(debug: bool = False, port: int = 8050) -> None:
    """Run the dashboard.

    Args:
        debug: Whether to run in debug mode
        port: Port to run the dashboard on
    """
    app = create_dashboard(debug=debug, port=port)
    app.run(debug=debug, port=port)

if __name__ == "__main__":
    run_dashboard(debug=True)
