# WebDAV data models.
# Created: 2026-03-02

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


def file_extension(name: str) -> str:
    """Lowercased text after the last dot, or "" when there is none."""
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


@dataclass(frozen=True)
class DirectoryEntry:
    """One child of a listed collection.

    ``href`` is kept exactly as the server sent it; it is only resolved
    against the server root when the entry is opened or played.
    """

    name: str
    href: str
    is_directory: bool = False
    size: int = 0
    is_video: bool = False
    content_type: str = ""
    last_modified: str = ""

    def with_media_extensions(self, extensions: frozenset[str]) -> DirectoryEntry:
        """Return a copy whose ``is_video`` follows the given extension set.

        The extension comes from the name, or from the href when the display
        name has none.
        """
        ext = file_extension(self.name) or file_extension(self.href.rstrip("/").rsplit("/", 1)[-1])
        is_video = not self.is_directory and ext in extensions
        if is_video == self.is_video:
            return self
        return replace(self, is_video=is_video)

    def to_payload(self) -> dict[str, Any]:
        """Message-channel form (camelCase keys)."""
        return {
            "name": self.name,
            "href": self.href,
            "isDirectory": self.is_directory,
            "size": self.size,
            "isVideo": self.is_video,
            "contentType": self.content_type,
            "lastModified": self.last_modified,
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> DirectoryEntry:
        is_directory = bool(data.get("isDirectory", False))
        try:
            size = max(int(data.get("size") or 0), 0)
        except (TypeError, ValueError):
            size = 0
        return cls(
            name=str(data.get("name", "")),
            href=str(data.get("href", "")),
            is_directory=is_directory,
            size=0 if is_directory else size,
            is_video=bool(data.get("isVideo", False)) and not is_directory,
            content_type=str(data.get("contentType") or ""),
            last_modified=str(data.get("lastModified") or ""),
        )
