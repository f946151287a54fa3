"""Chat Word Cloud - Command Line Interface.

This module provides a command-line interface for building word clouds from
chat-export CSV files and styled JSON word lists.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from . import __version__
from .aggregator import WordCloudSession
from .config import CloudConfig
from .layout import WordCloudLayout
from .models import DisplayItem
from .policy import FilterPolicy, default_policy, load_policy, prepare_cloud
from .utils.file_io import save_cloud_json
from .visualization import create_cloud_figure, save_cloud_png

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Log to the console and to ``chat_wordcloud.log``."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler('chat_wordcloud.log', encoding='utf-8')
        ]
    )

def parse_args(args: List[str]) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description='Chat Word Cloud - Build word clouds from chat exports')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Parent parser with common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument('inputs', nargs='+', metavar='INPUT',
                               help='CSV chat exports and/or JSON word lists, merged in order')
    parent_parser.add_argument('--policy', type=str, default=None,
                               help='Filter policy YAML (default: bundled policy)')
    parent_parser.add_argument('--max-words', type=int, default=None,
                               help='Maximum number of words in the cloud')
    parent_parser.add_argument('--min-count', type=int, default=None,
                               help='Drop words seen fewer times than this')
    parent_parser.add_argument('--seed', type=int, default=None,
                               help='Random seed for rotation and placement')

    # Build command
    build_parser = subparsers.add_parser('build', help='Build the display items and save them as JSON',
                                         parents=[parent_parser])
    build_parser.add_argument('--output', '-o', type=str, default='cloud.json',
                              help='Output JSON file (default: cloud.json)')

    # Render command
    render_parser = subparsers.add_parser('render', help='Lay out and render the word cloud',
                                          parents=[parent_parser])
    render_parser.add_argument('--output', '-o', type=str, default='cloud.html',
                               help='Output interactive HTML file (default: cloud.html)')
    render_parser.add_argument('--png', type=str, default=None,
                               help='Also save a static PNG image to this path')
    render_parser.add_argument('--width', type=int, default=None, help='Canvas width in pixels')
    render_parser.add_argument('--height', type=int, default=None, help='Canvas height in pixels')
    render_parser.add_argument('--font-path', type=str, default=None,
                               help='TrueType/OpenType font, needed for CJK text')
    render_parser.add_argument('--title', type=str, default=None, help='Figure title')

    # Dashboard command
    dashboard_parser = subparsers.add_parser(
        "dashboard",
        help="Launch interactive dashboard"
    )
    dashboard_parser.add_argument(
        "--port",
        type=int,
        default=8050,
        help="Port to run the dashboard on (default: 8050)"
    )
    dashboard_parser.add_argument(
        "--debug",
        action="store_true",
        help="Run in debug mode"
    )

    # If no arguments provided, show help
    if len(args) == 0:
        parser.print_help()
        sys.exit(0)

    return parser.parse_args(args)

def _load_policy(path: Optional[str]) -> FilterPolicy:
    if path:
        return load_policy(path)
    return default_policy()

def prepare_items(args: argparse.Namespace, config: CloudConfig) -> Tuple[WordCloudSession, List[DisplayItem]]:
    """Ingest the input files and build the ranked display items.

    Args:
        args: Parsed command line arguments
        config: Cloud configuration

    Returns:
        Tuple of (session holding the merged maps, display items)
    """
    session = WordCloudSession(max_upload_bytes=config.max_upload_bytes)
    results = session.ingest_batch(args.inputs)

    failed = [result for result in results if not result.ok]
    if failed:
        logger.warning(f"Skipped {len(failed)} of {len(results)} input files")

    if not session.word_counts:
        logger.error("No words were loaded. Nothing to build.")
        return session, []

    policy = _load_policy(args.policy)
    items = prepare_cloud(session.word_counts, session.word_styles, config, policy)
    logger.info(f"Prepared {len(items)} display items from {len(session.word_counts)} distinct words")
    return session, items

def build_command(args: argparse.Namespace) -> int:
    """Handle the build command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit status
    """
    config = CloudConfig.from_env().replace(
        max_words=args.max_words,
        min_count=args.min_count,
        random_seed=args.seed,
    )
    _, items = prepare_items(args, config)
    if not items:
        return 1

    output_path = save_cloud_json(items, args.output)
    logger.info(f"Saved {len(items)} words to {output_path}")
    return 0

def render_command(args: argparse.Namespace) -> int:
    """Handle the render command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit status
    """
    config = CloudConfig.from_env().replace(
        max_words=args.max_words,
        min_count=args.min_count,
        random_seed=args.seed,
        width=args.width,
        height=args.height,
        font_path=args.font_path,
    )
    _, items = prepare_items(args, config)
    if not items:
        return 1

    placed = WordCloudLayout(config).place(items, config.width, config.height)
    if len(placed) < len(items):
        logger.warning(f"Only {len(placed)} of {len(items)} words fit on the {config.width}x{config.height} canvas")

    create_cloud_figure(placed, config, title=args.title, output_file=Path(args.output))
    if args.png:
        save_cloud_png(placed, args.png, config)
    return 0

def dashboard_command(args: argparse.Namespace) -> int:
    """Handle the dashboard command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit status
    """
    from .dashboard import run_dashboard

    logger.info(f"Starting dashboard on port {args.port}")
    run_dashboard(debug=args.debug, port=args.port)
    return 0

def main() -> None:
    """Main entry point for the Chat Word Cloud CLI."""
    # Load environment variables
    load_dotenv()
    setup_logging()

    # Parse command line arguments
    args = parse_args(sys.argv[1:])

    # Configure logging
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.getLogger().setLevel(log_level)

    # Execute the appropriate command
    try:
        if args.command == "build":
            status = build_command(args)
        elif args.command == "render":
            status = render_command(args)
        elif args.command == "dashboard":
            status = dashboard_command(args)
        else:
            logger.error(f"Unknown command: {args.command}")
            status = 1
    except (ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        status = 1
    sys.exit(status)

if __name__ == "__main__":
    main()
