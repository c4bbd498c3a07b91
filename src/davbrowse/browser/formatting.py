# Presentation helpers — media filtering, ordering and size formatting.
# Created: 2026-03-03

from __future__ import annotations

import math
from collections.abc import Iterable

from davbrowse.webdav.models import DirectoryEntry, file_extension
from davbrowse.webdav.parser import sort_entries

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")

EMPTY_LISTING_MESSAGE = "No videos or folders here."


def is_media_file(name: str, extensions: frozenset[str]) -> bool:
    return file_extension(name) in extensions


def filter_visible(
    entries: Iterable[DirectoryEntry], extensions: frozenset[str]
) -> list[DirectoryEntry]:
    """Folders and playable media only, directories first."""
    marked = (e.with_media_extensions(extensions) for e in entries)
    return sort_entries(e for e in marked if e.is_directory or e.is_video)


def format_size(size: int) -> str:
    """Human-readable size; "" for zero or negative byte counts."""
    if size <= 0:
        return ""
    i = min(int(math.log(size, 1024)), len(_SIZE_UNITS) - 1)
    value = size / 1024**i
    # log() can land a hair under an exact power of 1024
    if value >= 1024 and i < len(_SIZE_UNITS) - 1:
        i += 1
        value /= 1024
    return f"{value:.1f} {_SIZE_UNITS[i]}" if i else f"{size} B"
