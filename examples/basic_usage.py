"""
Basic usage example for the Chat Word Cloud package.
"""

import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

def main():
    """Build a word cloud from the chat exports given on the command line."""
    if len(sys.argv) < 2:
        print("Usage: python examples/basic_usage.py CHAT.csv [WORDS.json ...]")
        return

    from chat_wordcloud import CloudConfig, WordCloudLayout, WordCloudSession, default_policy, prepare_cloud
    from chat_wordcloud.utils import save_cloud_json
    from chat_wordcloud.visualization import create_cloud_figure, save_cloud_png

    # Create output directory if it doesn't exist
    output_dir = Path("output")
    output_dir.mkdir(exist_ok=True)

    print("Step 1: Loading files...")
    session = WordCloudSession()
    for result in session.ingest_batch(sys.argv[1:]):
        if result.ok:
            print(f"  {result.filename}: {result.records} {result.kind.upper()} records")
        else:
            print(f"  {result.filename}: skipped ({result.error.message})")

    if not session.word_counts:
        print("No words loaded.")
        return

    print("Step 2: Filtering and ranking words...")
    config = CloudConfig.from_env()
    items = prepare_cloud(session.word_counts, session.word_styles, config, default_policy())
    for item in items[:10]:
        print(f"  {item.text}: {item.count}")

    print("Step 3: Laying out and rendering...")
    placed = WordCloudLayout(config).place(items, config.width, config.height)
    create_cloud_figure(placed, config, title="Chat Word Cloud", output_file=output_dir / "wordcloud.html")
    save_cloud_png(placed, output_dir / "wordcloud.png", config)
    save_cloud_json(items, output_dir / "wordcloud.json")

    print(f"Done. Results saved to {output_dir}")

if __name__ == "__main__":
    main()
