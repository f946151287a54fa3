"""
Shared test fixtures and configuration.
"""

import base64
import json

import pytest

from chat_wordcloud.config import CloudConfig
from chat_wordcloud.models import DisplayItem, PlacedItem
from chat_wordcloud.policy import default_policy

# Sample data for testing
SAMPLE_CSV = (
    "Timestamp,UserID,Username,Message,ThreadTS\n"
    "2024-01-01 10:00:00,U001,alice,こんにちは 世界 こんにちは,\n"
    "2024-01-01 10:05:00,U002,bob,定例 を 始めます！,1704103500.000100\n"
)

SAMPLE_WORDS = [
    {"text": "テスト", "count": 5, "color": "#ff0000"},
    {"text": "確認", "count": 2, "color": "#00ff00"},
]


@pytest.fixture
def sample_csv_bytes():
    """Chat export with two Japanese messages."""
    return SAMPLE_CSV.encode("utf-8")

@pytest.fixture
def sample_json_bytes():
    """Styled word list."""
    return json.dumps(SAMPLE_WORDS, ensure_ascii=False).encode("utf-8")

@pytest.fixture
def csv_file(tmp_path, sample_csv_bytes):
    """Create a temporary chat export CSV."""
    file_path = tmp_path / "chat.csv"
    file_path.write_bytes(sample_csv_bytes)
    return file_path

@pytest.fixture
def json_file(tmp_path, sample_json_bytes):
    """Create a temporary styled word list."""
    file_path = tmp_path / "words.json"
    file_path.write_bytes(sample_json_bytes)
    return file_path

@pytest.fixture
def config():
    """Deterministic cloud configuration."""
    return CloudConfig(random_seed=42)

@pytest.fixture
def policy():
    """The bundled filter policy."""
    return default_policy()

@pytest.fixture
def sample_items():
    """Display items as they come out of the policy."""
    return [
        DisplayItem(text="meeting", count=10, font_size=64, color="#2563eb", importance=1.04, weight=10, rotation=0),
        DisplayItem(text="agenda", count=6, font_size=40, color="#ff0000", importance=0.85, weight=6, rotation=90),
        DisplayItem(text="review", count=2, font_size=12, color="#3b82f6", importance=0.48, weight=2, rotation=0),
    ]

@pytest.fixture
def placed_items(sample_items):
    """Items positioned on a 1200x800 canvas."""
    return [
        PlacedItem(item=sample_items[0], x=600, y=400, font_size=64, rotation=0),
        PlacedItem(item=sample_items[1], x=300, y=200, font_size=40, rotation=90),
        PlacedItem(item=sample_items[2], x=900, y=650, font_size=12, rotation=0),
    ]

@pytest.fixture
def data_url():
    """Encode bytes the way dcc.Upload sends them."""
    def encode(content: bytes, content_type: str = "text/csv") -> str:
        return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"
    return encode
