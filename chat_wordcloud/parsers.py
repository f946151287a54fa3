"""Decoders for uploaded chat-export CSV files and styled JSON word lists."""

import base64
import binascii
import csv
import io
import json
import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from .errors import FileTooLargeError, ParseError, ReadError, UnsupportedFormatError
from .models import RawMessageRecord, StyledWordRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 5 * 1024 * 1024
CSV_ENCODINGS = ['utf-8-sig', 'cp932', 'latin-1']
CSV_COLUMNS = {
    'Timestamp': 'timestamp',
    'UserID': 'user_id',
    'Username': 'username',
    'Message': 'message',
    'ThreadTS': 'thread_ts',
}
HEX_COLOR = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')

Source = Union[bytes, str, Path, io.IOBase]


@dataclass(frozen=True)
class ParsedUpload:
    """The decoded content of one uploaded file."""

    filename: str
    kind: str
    records: List[Any]


def detect_format(filename: str) -> str:
    """Return ``'csv'`` or ``'json'`` based on the file extension.

    Raises:
        UnsupportedFormatError: for any other extension
    """
    suffix = Path(filename).suffix.lower()
    if suffix == '.csv':
        return 'csv'
    if suffix == '.json':
        return 'json'
    raise UnsupportedFormatError(
        "Unsupported file format; upload a .csv or .json file", filename=filename
    )


def _read_bytes(source: Source, filename: Optional[str] = None) -> bytes:
    if isinstance(source, bytes):
        return source
    try:
        if isinstance(source, (str, Path)):
            return Path(source).read_bytes()
        data = source.read()
    except OSError as e:
        raise ReadError(f"Failed to read file: {e}", filename=filename) from e
    return data.encode('utf-8') if isinstance(data, str) else data


def _check_row_widths(text: str, filename: Optional[str]) -> None:
    """Raise ParseError naming every record whose field count differs from the header."""
    reader = csv.reader(io.StringIO(text), skipinitialspace=True)
    width = None
    bad_rows = []
    try:
        for row in reader:
            if not row:
                continue
            if width is None:
                width = len(row)
            elif len(row) != width:
                bad_rows.append((reader.line_num, len(row)))
    except csv.Error as exc:
        raise ParseError(f"CSV file could not be parsed: {exc}", filename=filename) from exc
    if bad_rows:
        details = ', '.join(f"line {line} has {count}" for line, count in bad_rows[:5])
        more = f" (and {len(bad_rows) - 5} more)" if len(bad_rows) > 5 else ''
        raise ParseError(
            f"CSV rows must have {width} fields like the header; {details}{more}",
            filename=filename,
        )


def _read_csv_with_fallback(data: bytes, filename: Optional[str]) -> pd.DataFrame:
    """Read CSV bytes trying UTF-8 first and falling back to common legacy encodings."""
    last_error = None
    for encoding in CSV_ENCODINGS:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError as exc:
            last_error = exc
            continue
        _check_row_widths(text, filename)
        try:
            return pd.read_csv(
                io.StringIO(text),
                index_col=False,
                dtype={'Message': str},
                keep_default_na=False,
                na_values=[''],
                skip_blank_lines=True,
                skipinitialspace=True,
            )
        except pd.errors.EmptyDataError as exc:
            raise ParseError("CSV file is empty", filename=filename) from exc
        except pd.errors.ParserError as exc:
            raise ParseError(f"CSV file could not be parsed: {exc}", filename=filename) from exc
    raise ParseError(f"Unable to decode CSV using {CSV_ENCODINGS}: {last_error}", filename=filename)


def _clean_value(value: Any) -> Any:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def parse_csv(source: Source, filename: Optional[str] = None) -> List[RawMessageRecord]:
    """Decode a chat-export CSV into message records.

    The first row must be a header. Numeric-looking columns are converted to
    numbers by pandas; the ``Message`` column is always kept as text.

    Args:
        source: Raw bytes, a path or a binary/text file handle
        filename: Name used in error messages

    Returns:
        List of RawMessageRecord, one per data row

    Raises:
        ParseError: if the CSV is structurally invalid or has no Message column
        ReadError: if the source cannot be read
    """
    data = _read_bytes(source, filename)
    df = _read_csv_with_fallback(data, filename)
    df.columns = [str(column).strip() for column in df.columns]

    if 'Message' not in df.columns:
        raise ParseError(
            f"CSV header has no 'Message' column. Available: {', '.join(df.columns)}",
            filename=filename,
        )
    missing = [column for column in CSV_COLUMNS if column not in df.columns]
    if missing:
        logger.warning(f"{filename or 'CSV'}: missing columns {', '.join(missing)}")

    records = []
    for row in df.to_dict('records'):
        fields: Dict[str, Any] = {}
        for column, attr in CSV_COLUMNS.items():
            fields[attr] = _clean_value(row.get(column))
        fields['message'] = '' if fields['message'] is None else str(fields['message'])
        records.append(RawMessageRecord(**fields))

    logger.info(f"Parsed {len(records)} messages from {filename or 'CSV'}")
    return records


def _validate_styled_word(element: Any, index: int, filename: Optional[str]) -> StyledWordRecord:
    if not isinstance(element, dict):
        raise ParseError(f"Element {index} is not an object", filename=filename)

    text = element.get('text')
    if not isinstance(text, str) or not text.strip():
        raise ParseError(f"Element {index} has no 'text' string", filename=filename)

    count = element.get('count')
    if isinstance(count, bool) or not isinstance(count, (int, float)) or not math.isfinite(count) or count < 0:
        raise ParseError(f"Element {index} ('{text}') has an invalid 'count': {count!r}", filename=filename)

    color = element.get('color')
    if not isinstance(color, str) or not HEX_COLOR.match(color):
        raise ParseError(f"Element {index} ('{text}') has an invalid 'color': {color!r}", filename=filename)

    return StyledWordRecord(text=text, count=int(count), color=color)


def parse_json(source: Source, filename: Optional[str] = None) -> List[StyledWordRecord]:
    """Decode a JSON word list into styled word records.

    Accepts either a bare array of ``{text, count, color}`` objects or an
    exported ``{"items": [...], "metadata": {...}}`` document. Every element is
    validated; one bad element rejects the whole file.

    Args:
        source: Raw bytes, a path or a binary/text file handle
        filename: Name used in error messages

    Returns:
        List of StyledWordRecord

    Raises:
        ParseError: if the content is not valid JSON or an element is malformed
        ReadError: if the source cannot be read
    """
    data = _read_bytes(source, filename)
    try:
        document = json.loads(data.decode('utf-8-sig'))
    except UnicodeDecodeError as e:
        raise ParseError(f"JSON file is not valid UTF-8: {e}", filename=filename) from e
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}", filename=filename) from e

    if isinstance(document, dict) and isinstance(document.get('items'), list):
        document = document['items']
    if not isinstance(document, list):
        raise ParseError("JSON content must be an array of words", filename=filename)

    records = [_validate_styled_word(element, i, filename) for i, element in enumerate(document)]
    logger.info(f"Parsed {len(records)} styled words from {filename or 'JSON'}")
    return records


def load_upload(filename: str, content: Union[bytes, io.IOBase],
                max_bytes: int = DEFAULT_MAX_BYTES) -> ParsedUpload:
    """Check and decode one uploaded file.

    Args:
        filename: Original file name, used to pick the parser
        content: File bytes or a file handle
        max_bytes: Upload size limit

    Returns:
        ParsedUpload with the decoded records

    Raises:
        UnsupportedFormatError, FileTooLargeError, ParseError, ReadError
    """
    kind = detect_format(filename)
    data = _read_bytes(content, filename)
    if len(data) > max_bytes:
        raise FileTooLargeError(
            f"File is {len(data) / (1024 * 1024):.1f} MB; the limit is {max_bytes / (1024 * 1024):.0f} MB",
            filename=filename,
        )

    if kind == 'csv':
        records: List[Any] = parse_csv(data, filename=filename)
    else:
        records = parse_json(data, filename=filename)
    return ParsedUpload(filename=filename, kind=kind, records=records)


def load_file(path: Union[str, Path], max_bytes: int = DEFAULT_MAX_BYTES) -> ParsedUpload:
    """Load an upload from disk."""
    path = Path(path)
    detect_format(path.name)
    try:
        size = path.stat().st_size
    except OSError as e:
        raise ReadError(f"Failed to read file: {e}", filename=path.name) from e
    if size > max_bytes:
        raise FileTooLargeError(
            f"File is {size / (1024 * 1024):.1f} MB; the limit is {max_bytes / (1024 * 1024):.0f} MB",
            filename=path.name,
        )
    return load_upload(path.name, _read_bytes(path, path.name), max_bytes=max_bytes)


def decode_data_url(contents: str, filename: Optional[str] = None) -> bytes:
    """Decode the ``data:<type>;base64,<payload>`` string sent by ``dcc.Upload``.

    Raises:
        ReadError: if the payload is not valid base64
    """
    try:
        content_type, content_string = contents.split(',', 1)
        return base64.b64decode(content_string, validate=True)
    except (ValueError, AttributeError, binascii.Error) as exc:
        raise ReadError(f"Failed to decode upload: {exc}", filename=filename) from exc
