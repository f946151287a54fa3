"""Word frequency aggregation across successive uploads.

The merge functions never mutate their inputs: each returns new maps and the
caller swaps its references. ``WordCloudSession`` is the single owner of the
running maps for CLI and API use; the dashboard keeps the same maps in
browser-side stores and calls the merge functions directly.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .errors import WordCloudError
from .models import RawMessageRecord, StyledWordRecord
from .parsers import DEFAULT_MAX_BYTES, ParsedUpload, load_file, load_upload
from .utils.text_processing import tokenize

logger = logging.getLogger(__name__)

WordCountMap = Dict[str, int]
WordStyleMap = Dict[str, str]


def merge_messages(word_counts: WordCountMap,
                   records: Iterable[RawMessageRecord]) -> WordCountMap:
    """Add the whitespace-split tokens of each message to a copy of the counts.

    Repeated tokens within one message are counted every time.

    Args:
        word_counts: Current word counts
        records: Parsed CSV rows

    Returns:
        New word count map
    """
    merged = dict(word_counts)
    for record in records:
        for token in tokenize(record.message):
            merged[token] = merged.get(token, 0) + 1
    return merged


def merge_styled_words(word_counts: WordCountMap, word_styles: WordStyleMap,
                       records: Iterable[StyledWordRecord]) -> Tuple[WordCountMap, WordStyleMap]:
    """Merge a styled word list: counts are added, colours are overwritten.

    Args:
        word_counts: Current word counts
        word_styles: Current colour overrides
        records: Parsed JSON entries

    Returns:
        Tuple of (new word counts, new word styles)
    """
    counts = dict(word_counts)
    styles = dict(word_styles)
    for record in records:
        styles[record.text] = record.color
        counts[record.text] = counts.get(record.text, 0) + record.count
    return counts, styles


def apply_upload(word_counts: WordCountMap, word_styles: WordStyleMap,
                 upload: ParsedUpload) -> Tuple[WordCountMap, WordStyleMap]:
    """Merge one parsed upload into the maps according to its kind."""
    if upload.kind == 'json':
        return merge_styled_words(word_counts, word_styles, upload.records)
    return merge_messages(word_counts, upload.records), word_styles


@dataclass(frozen=True)
class IngestResult:
    """Outcome of ingesting one file of a batch."""

    filename: str
    kind: Optional[str] = None
    records: int = 0
    error: Optional[WordCloudError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class WordCloudSession:
    """Owns the word count and word style maps for one session."""

    def __init__(self, word_counts: Optional[WordCountMap] = None,
                 word_styles: Optional[WordStyleMap] = None,
                 max_upload_bytes: int = DEFAULT_MAX_BYTES):
        self.word_counts: WordCountMap = dict(word_counts or {})
        self.word_styles: WordStyleMap = dict(word_styles or {})
        self.max_upload_bytes = max_upload_bytes

    def ingest(self, upload: ParsedUpload) -> None:
        """Merge an already parsed upload into the session."""
        self.word_counts, self.word_styles = apply_upload(self.word_counts, self.word_styles, upload)
        logger.info(
            f"Merged {len(upload.records)} {upload.kind.upper()} records from {upload.filename}; "
            f"{len(self.word_counts)} distinct words"
        )

    def ingest_file(self, path: Union[str, Path]) -> ParsedUpload:
        """Parse a file from disk and merge it. Errors propagate to the caller."""
        upload = load_file(path, max_bytes=self.max_upload_bytes)
        self.ingest(upload)
        return upload

    def ingest_batch(self, files: Iterable[Union[str, Path, Tuple[str, bytes]]]) -> List[IngestResult]:
        """Ingest several files strictly in order.

        A file that fails is reported in its result and skipped; whatever the
        earlier files merged stays in place.

        Args:
            files: Paths, or ``(filename, content)`` pairs for in-memory uploads

        Returns:
            One IngestResult per file, in input order
        """
        results = []
        for entry in files:
            if isinstance(entry, tuple):
                filename, content = entry
            else:
                filename, content = Path(entry).name, None
            try:
                if content is None:
                    upload = self.ingest_file(entry)
                else:
                    upload = load_upload(filename, content, max_bytes=self.max_upload_bytes)
                    self.ingest(upload)
            except WordCloudError as e:
                logger.error(f"Failed to process {filename}: {e.message}")
                results.append(IngestResult(filename=filename, error=e))
                continue
            results.append(IngestResult(filename=filename, kind=upload.kind,
                                        records=len(upload.records)))
        return results

    def clear(self) -> None:
        """Forget all counts and styles."""
        self.word_counts = {}
        self.word_styles = {}

    def to_dict(self) -> Dict[str, Any]:
        return {'word_counts': dict(self.word_counts), 'word_styles': dict(self.word_styles)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], **kwargs: Any) -> "WordCloudSession":
        data = data or {}
        return cls(word_counts=data.get('word_counts'), word_styles=data.get('word_styles'), **kwargs)
