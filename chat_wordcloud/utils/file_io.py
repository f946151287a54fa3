"""File I/O utilities for Chat Word Cloud."""

import os
import json
from pathlib import Path
from typing import List, Optional, Union

from ..models import CloudMetadata, DisplayItem


def ensure_directory_exists(directory: Union[str, Path]) -> None:
    """Ensure that a directory exists, creating it if necessary."""
    if str(directory):
        os.makedirs(directory, exist_ok=True)


def cloud_to_json(items: List[DisplayItem], metadata: Optional[CloudMetadata] = None) -> str:
    """Serialise display items to the ``[{text, count, fontSize, color}]`` format.

    Args:
        items: Display items to export
        metadata: If provided, wrap the items as ``{"items": [...], "metadata": {...}}``

    Returns:
        JSON string
    """
    exported = [item.to_export() for item in items]
    if metadata is not None:
        return json.dumps({"items": exported, "metadata": metadata.to_dict()},
                          ensure_ascii=False, indent=2)
    return json.dumps(exported, ensure_ascii=False, indent=2)


def save_cloud_json(items: List[DisplayItem], out_path: Union[str, Path]) -> str:
    """Save display items to a JSON file that can be uploaded again.

    Args:
        items: Display items to export
        out_path: Path to save the JSON file

    Returns:
        Path to the saved file
    """
    out_path = Path(out_path)
    ensure_directory_exists(out_path.parent)
    with open(out_path, 'w', encoding='utf-8') as f:
        f.write(cloud_to_json(items))
    return str(out_path)

