"""Navigation state machine.

Created: 2026-03-04
Changes:
  - 2026-03-10: Results for a path other than the pending one are dropped,
    so a slow response cannot overwrite a newer navigation.

The transition functions are pure: (state, input) -> new state. Navigator
wires them to a DirectoryLister for the direct transport; the UI session
(davbrowse.ui.session) wires the same functions to the message bus.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, replace
from urllib.parse import urljoin, urlsplit

from davbrowse.browser.formatting import filter_visible
from davbrowse.browser.state import NavigationState, ViewStatus, normalize_path
from davbrowse.webdav.errors import (
    AUTH_FAILED,
    AUTH_FAILED_STATE_MESSAGE,
    NOT_CONFIGURED,
    NOT_CONFIGURED_STATE_MESSAGE,
    WebDAVError,
    error_token,
)
from davbrowse.webdav.models import DirectoryEntry
from davbrowse.webdav.protocol import DirectoryLister

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayRequest:
    """Emitted when a media entry is opened."""

    href: str
    name: str


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------


def begin_navigation(state: NavigationState, path: str) -> NavigationState:
    """Enter Loading(path). Any earlier pending path becomes stale."""
    return replace(state, status=ViewStatus.LOADING, pending_path=normalize_path(path), error="")


def is_pending(state: NavigationState, path: str) -> bool:
    return state.status is ViewStatus.LOADING and state.pending_path == normalize_path(path)


def apply_listing(
    state: NavigationState, path: str, entries: Iterable[DirectoryEntry]
) -> NavigationState:
    """Enter Loaded(path, entries) if ``path`` is the pending one."""
    if not is_pending(state, path):
        logger.debug("Dropping stale listing for %s", path)
        return state
    return replace(
        state,
        status=ViewStatus.LOADED,
        current_path=normalize_path(path),
        pending_path=None,
        entries=tuple(filter_visible(entries, state.media_extensions)),
        error="",
    )


def failure_message(token: str) -> str:
    if token == AUTH_FAILED:
        return AUTH_FAILED_STATE_MESSAGE
    if token == NOT_CONFIGURED:
        return NOT_CONFIGURED_STATE_MESSAGE
    return token


def apply_failure(state: NavigationState, path: str, message: str) -> NavigationState:
    """Enter Error(path, message) if ``path`` is the pending one."""
    if not is_pending(state, path):
        logger.debug("Dropping stale error for %s: %s", path, message)
        return state
    return replace(
        state,
        status=ViewStatus.ERROR,
        current_path=normalize_path(path),
        pending_path=None,
        entries=(),
        error=failure_message(message),
    )


def resolve_entry_path(href: str, server_root: str) -> str:
    """Absolute collection path for a directory href, relative to the root.

    The server root's own path prefix is removed, because listing requests
    append the path to the root again. A malformed href is returned as is.
    """
    try:
        path = urlsplit(urljoin(server_root + "/", href)).path
        root_path = urlsplit(server_root).path.rstrip("/")
    except ValueError:
        return href
    if root_path and (path == root_path or path.startswith(root_path + "/")):
        path = path[len(root_path) :]
    return path or "/"


# ---------------------------------------------------------------------------
# Direct-transport driver
# ---------------------------------------------------------------------------

StateListener = Callable[[NavigationState], None]
PlayHandler = Callable[[PlayRequest], Awaitable[None]]


class Navigator:
    """Drives navigation against a DirectoryLister.

    ``navigate`` may be called again before an earlier call finishes; only
    the latest requested path's outcome reaches the state.
    """

    def __init__(
        self,
        state: NavigationState,
        lister: DirectoryLister,
        on_play: PlayHandler | None = None,
    ):
        self._state = state
        self._lister = lister
        self._on_play = on_play
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> NavigationState:
        return self._state

    def subscribe(self, listener: StateListener) -> None:
        """Call ``listener`` with every new state."""
        self._listeners.append(listener)

    def _set(self, state: NavigationState) -> None:
        if state is self._state:
            return
        self._state = state
        for listener in self._listeners:
            try:
                listener(state)
            except Exception:
                logger.exception("State listener failed")

    async def navigate(self, path: str) -> NavigationState:
        self._set(begin_navigation(self._state, path))
        target = self._state.pending_path
        if not self._state.is_configured:
            self._set(apply_failure(self._state, target, NOT_CONFIGURED))
            return self._state

        try:
            entries = await self._lister.list_directory(target)
        except WebDAVError as e:
            logger.warning("Listing %s failed: %s", target, e)
            self._set(apply_failure(self._state, target, error_token(e)))
        else:
            self._set(apply_listing(self._state, target, entries))
        return self._state

    async def start(self) -> NavigationState:
        """Open the configured start path (no-op when unconfigured)."""
        if not self._state.is_configured:
            return self._state
        return await self.navigate(self._state.start_path)

    async def open_breadcrumb(self, index: int) -> NavigationState:
        crumb = self._state.breadcrumbs()[index]
        if not crumb.clickable:
            return self._state
        return await self.navigate(crumb.path)

    async def open_entry(self, entry: DirectoryEntry) -> NavigationState:
        """Directories navigate; media emits a PlayRequest and keeps the listing."""
        if entry.is_directory:
            return await self.navigate(resolve_entry_path(entry.href, self._state.server_root))
        if self._on_play is not None:
            await self._on_play(PlayRequest(href=entry.href, name=entry.name))
        return self._state
