"""Utility functions for Chat Word Cloud."""

from .file_io import ensure_directory_exists, cloud_to_json, save_cloud_json
from .text_processing import tokenize, is_punctuation_only, contains_any

__all__ = [
    'ensure_directory_exists',
    'cloud_to_json',
    'save_cloud_json',
    'tokenize',
    'is_punctuation_only',
    'contains_any'
]
