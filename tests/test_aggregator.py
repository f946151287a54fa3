"""
Tests for word count aggregation.
"""

import pytest

from chat_wordcloud.aggregator import (
    WordCloudSession,
    apply_upload,
    merge_messages,
    merge_styled_words,
)
from chat_wordcloud.errors import UnsupportedFormatError
from chat_wordcloud.models import RawMessageRecord, StyledWordRecord
from chat_wordcloud.parsers import load_upload


def _message(text):
    return RawMessageRecord(timestamp="t", user_id="U1", username="alice", message=text)


def test_merge_messages():
    """Every occurrence of a token is counted, including repeats in one message."""
    counts = {"世界": 1}
    merged = merge_messages(counts, [_message("こんにちは 世界 こんにちは"), _message(""), _message("  ")])

    assert merged == {"こんにちは": 2, "世界": 2}
    # Input maps are never modified
    assert counts == {"世界": 1}


def test_merge_messages_is_cumulative():
    """Merging the same messages twice doubles every count."""
    records = [_message("定例 を 始めます！"), _message("定例 確認")]
    once = merge_messages({}, records)
    twice = merge_messages(once, records)

    for word, count in once.items():
        assert twice[word] == 2 * count


def test_merge_styled_words():
    """Counts are added and the latest colour wins."""
    first = [StyledWordRecord(text="テスト", count=5, color="#ff0000")]
    second = [StyledWordRecord(text="テスト", count=5, color="#0000ff")]

    counts, styles = merge_styled_words({}, {}, first)
    counts, styles = merge_styled_words(counts, styles, second)

    assert counts == {"テスト": 10}
    assert styles == {"テスト": "#0000ff"}


def test_apply_upload(sample_csv_bytes, sample_json_bytes):
    """Test routing uploads by kind."""
    counts, styles = apply_upload({}, {}, load_upload("chat.csv", sample_csv_bytes))
    assert counts["こんにちは"] == 2
    assert counts["世界"] == 1
    assert styles == {}

    counts, styles = apply_upload(counts, styles, load_upload("words.json", sample_json_bytes))
    assert counts["テスト"] == 5
    assert styles["テスト"] == "#ff0000"
    assert counts["こんにちは"] == 2


def test_session_ingest_file(csv_file, json_file):
    """Test accumulating uploads in a session."""
    session = WordCloudSession()
    session.ingest_file(csv_file)
    session.ingest_file(csv_file)

    assert session.word_counts["こんにちは"] == 4
    assert session.word_counts["世界"] == 2

    session.ingest_file(json_file)
    session.ingest_file(json_file)
    assert session.word_counts["テスト"] == 10
    assert session.word_styles["確認"] == "#00ff00"


def test_session_rejects_unsupported_format(csv_file, tmp_path):
    """A .txt upload raises and leaves the maps untouched."""
    session = WordCloudSession()
    session.ingest_file(csv_file)
    before = session.to_dict()

    txt_file = tmp_path / "notes.txt"
    txt_file.write_text("こんにちは", encoding="utf-8")
    with pytest.raises(UnsupportedFormatError):
        session.ingest_file(txt_file)

    assert session.to_dict() == before


def test_session_ingest_batch(csv_file, json_file, tmp_path, sample_json_bytes):
    """A failing file is reported and skipped; the others are merged in order."""
    bad_json = tmp_path / "broken.json"
    bad_json.write_text("{oops", encoding="utf-8")

    session = WordCloudSession()
    results = session.ingest_batch([
        csv_file,
        tmp_path / "notes.txt",
        bad_json,
        ("extra.json", sample_json_bytes),
        json_file,
    ])

    assert [r.ok for r in results] == [True, False, False, True, True]
    assert results[0].kind == "csv"
    assert results[0].records == 2
    assert results[1].filename == "notes.txt"
    assert isinstance(results[1].error, UnsupportedFormatError)
    assert session.word_counts["こんにちは"] == 2
    assert session.word_counts["テスト"] == 10


def test_session_clear_and_restore(csv_file):
    """Test clearing and serialising a session."""
    session = WordCloudSession()
    session.ingest_file(csv_file)

    restored = WordCloudSession.from_dict(session.to_dict())
    assert restored.word_counts == session.word_counts

    session.clear()
    assert session.word_counts == {}
    assert session.word_styles == {}
    assert WordCloudSession.from_dict(None).word_counts == {}
