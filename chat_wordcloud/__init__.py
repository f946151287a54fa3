"""
Chat Word Cloud - Build interactive word clouds from chat exports and styled word lists.
"""

__version__ = "0.1.0"

from .aggregator import WordCloudSession, merge_messages, merge_styled_words
from .builder import build_display_items, calculate_font_size
from .config import CloudConfig
from .errors import FileTooLargeError, ParseError, ReadError, UnsupportedFormatError, WordCloudError
from .layout import LayoutAdapter, WordCloudLayout
from .models import CloudMetadata, DisplayItem, PlacedItem, RawMessageRecord, StyledWordRecord
from .parsers import load_file, load_upload, parse_csv, parse_json
from .policy import FilterPolicy, default_policy, load_policy, prepare_cloud

__all__ = [
    'WordCloudSession',
    'merge_messages',
    'merge_styled_words',
    'build_display_items',
    'calculate_font_size',
    'CloudConfig',
    'WordCloudError',
    'UnsupportedFormatError',
    'ParseError',
    'ReadError',
    'FileTooLargeError',
    'LayoutAdapter',
    'WordCloudLayout',
    'CloudMetadata',
    'DisplayItem',
    'PlacedItem',
    'RawMessageRecord',
    'StyledWordRecord',
    'load_file',
    'load_upload',
    'parse_csv',
    'parse_json',
    'FilterPolicy',
    'default_policy',
    'load_policy',
    'prepare_cloud'
]
