"""
Utilities for deriving destination paths from untrusted track metadata.
"""

from pathlib import Path
from typing import Optional

# Characters rejected by at least one mainstream filesystem.
ILLEGAL_FILENAME_CHARS = '<>:"/\\|?*'
_ILLEGAL_TABLE = str.maketrans({c: "_" for c in ILLEGAL_FILENAME_CHARS})

TRACK_EXTENSION = "mp3"
PARTIAL_SUFFIX = ".part"


def sanitize_component(value: str) -> str:
    """Replaces illegal filename characters with '_' and trims whitespace."""
    return value.translate(_ILLEGAL_TABLE).strip()


def resolve_track_path(
    title: Optional[str], collection: str, directory: str, track_id: int
) -> Path:
    """
    Builds `<directory>/<collection>/<title>.mp3` with both user-controlled
    segments sanitized. Falls back to `track-<id>` when the title is missing.
    """
    safe_title = sanitize_component(title or f"track-{track_id}")
    safe_collection = sanitize_component(collection)
    return Path(directory) / safe_collection / f"{safe_title}.{TRACK_EXTENSION}"


def partial_path(final_path: Path) -> Path:
    """Returns the temporary download path bound to a final destination."""
    return final_path.with_name(final_path.name + PARTIAL_SUFFIX)
