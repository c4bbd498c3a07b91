"""Bus message types.

Created: 2026-03-05

Every message is a name plus a JSON-compatible payload. Payloads are copied
when a message is built, so nothing mutable is shared across the boundary.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from davbrowse.webdav.models import DirectoryEntry


class Side(str, Enum):
    """Which process a message is delivered to."""

    UI = "ui"
    HOST = "host"


class MessageName(str, Enum):
    # UI -> host
    GET_CONFIG = "get-config"
    PROPFIND = "propfind"
    PLAY_FILE = "play-file"
    # host -> UI
    CONFIG = "config"
    PROPFIND_RESULT = "propfind-result"
    PROPFIND_ERROR = "propfind-error"


# Receiving side of each message
DESTINATIONS: dict[MessageName, Side] = {
    MessageName.GET_CONFIG: Side.HOST,
    MessageName.PROPFIND: Side.HOST,
    MessageName.PLAY_FILE: Side.HOST,
    MessageName.CONFIG: Side.UI,
    MessageName.PROPFIND_RESULT: Side.UI,
    MessageName.PROPFIND_ERROR: Side.UI,
}


@dataclass
class Message:
    name: MessageName
    payload: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.name = MessageName(self.name)
        self.payload = copy.deepcopy(self.payload or {})

    @property
    def destination(self) -> Side:
        return DESTINATIONS[self.name]

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name.value, "payload": copy.deepcopy(self.payload)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        return cls(name=MessageName(data["name"]), payload=data.get("payload") or {})


# ---------------------------------------------------------------------------
# Constructors for each channel
# ---------------------------------------------------------------------------


def get_config() -> Message:
    return Message(MessageName.GET_CONFIG)


def config(payload: dict[str, str]) -> Message:
    return Message(MessageName.CONFIG, payload)


def propfind(path: str) -> Message:
    return Message(MessageName.PROPFIND, {"path": path})


def propfind_result(path: str, entries: Iterable[DirectoryEntry]) -> Message:
    return Message(
        MessageName.PROPFIND_RESULT,
        {"path": path, "entries": [e.to_payload() for e in entries]},
    )


def propfind_error(path: str, message: str) -> Message:
    return Message(MessageName.PROPFIND_ERROR, {"path": path, "message": message})


def play_file(href: str, name: str) -> Message:
    return Message(MessageName.PLAY_FILE, {"href": href, "name": name})


def entries_from_payload(payload: dict[str, Any]) -> list[DirectoryEntry]:
    raw = payload.get("entries") or []
    return [DirectoryEntry.from_payload(item) for item in raw if isinstance(item, dict)]
