"""Navigation state.

Created: 2026-03-03

NavigationState is immutable; every transition builds a new one with
dataclasses.replace. Entries are a tuple and are only ever swapped wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import unquote

from davbrowse.browser.formatting import EMPTY_LISTING_MESSAGE
from davbrowse.config import normalize_server_root, parse_extensions
from davbrowse.webdav.errors import (
    AUTH_FAILED,
    AUTH_FAILED_STATE_MESSAGE,
    NOT_CONFIGURED,
    NOT_CONFIGURED_STATE_MESSAGE,
    user_message,
)
from davbrowse.webdav.models import DirectoryEntry


class ViewStatus(str, Enum):
    """Where the browser is in its load cycle."""

    IDLE = "idle"  # Nothing requested yet (or unconfigured)
    LOADING = "loading"  # Waiting for pending_path
    LOADED = "loaded"  # entries belong to current_path
    ERROR = "error"  # Last navigation failed


def normalize_path(path: str) -> str:
    path = path or "/"
    return path if path.startswith("/") else "/" + path


@dataclass(frozen=True)
class Breadcrumb:
    """One breadcrumb segment. ``path`` is what clicking it navigates to."""

    label: str
    path: str
    clickable: bool = True


@dataclass(frozen=True)
class NavigationState:
    server_root: str = ""
    username: str = ""
    password: str = ""
    start_path: str = "/"
    media_extensions: frozenset[str] = frozenset()
    status: ViewStatus = ViewStatus.IDLE
    current_path: str = "/"
    pending_path: str | None = None
    entries: tuple[DirectoryEntry, ...] = field(default_factory=tuple)
    error: str = ""

    @classmethod
    def from_config(cls, payload: dict) -> NavigationState:
        """Build a fresh state from a ``config`` message payload."""
        return cls(
            server_root=normalize_server_root(payload.get("serverUrl")),
            username=payload.get("username") or "",
            password=payload.get("password") or "",
            start_path=normalize_path(payload.get("startPath") or "/"),
            media_extensions=parse_extensions(payload.get("videoExtensions")),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.server_root)

    @property
    def shown_path(self) -> str:
        """Path the view is about: the pending one while loading."""
        return self.pending_path or self.current_path

    def breadcrumbs(self) -> list[Breadcrumb]:
        return build_breadcrumbs(self.current_path)


def build_breadcrumbs(path: str) -> list[Breadcrumb]:
    """Root plus one segment per path component; the last one is "here"."""
    parts = [p for p in path.split("/") if p]
    crumbs = [Breadcrumb(label="/", path="/", clickable=bool(parts))]
    accumulated = ""
    for i, part in enumerate(parts):
        accumulated += "/" + part
        crumbs.append(
            Breadcrumb(
                label=unquote(part),
                path=accumulated,
                clickable=i < len(parts) - 1,
            )
        )
    return crumbs


def status_message(state: NavigationState) -> str:
    """Text for the status line under the breadcrumb ("" when nothing to say)."""
    if not state.is_configured:
        return user_message(NOT_CONFIGURED)
    if state.status is ViewStatus.ERROR:
        if state.error == AUTH_FAILED_STATE_MESSAGE:
            return user_message(AUTH_FAILED)
        if state.error == NOT_CONFIGURED_STATE_MESSAGE:
            return user_message(NOT_CONFIGURED)
        return user_message(state.error)
    if state.status is ViewStatus.LOADED and not state.entries:
        return EMPTY_LISTING_MESSAGE
    return ""
