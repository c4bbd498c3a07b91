"""UI session.

Created: 2026-03-07
Changes:
  - 2026-03-11: Direct mode. The UI can run PROPFIND itself when its context
    allows network calls; results go through the same reducer as host replies.

``reduce`` is a pure function (state, message) -> (state, messages to send).
UISession holds the current state, feeds it incoming bus messages and routes
what the reducer emits: ``propfind`` goes to the host in delegated mode or to
a local lister in direct mode; everything else goes to the host.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from davbrowse.browser.navigator import (
    apply_failure,
    apply_listing,
    begin_navigation,
    resolve_entry_path,
)
from davbrowse.browser.state import NavigationState, ViewStatus
from davbrowse.bus import events
from davbrowse.bus.events import Message, MessageName
from davbrowse.bus.queue import MessageBus
from davbrowse.webdav.client import HttpDirectoryLister
from davbrowse.webdav.errors import NOT_CONFIGURED, WebDAVError, error_token
from davbrowse.webdav.models import DirectoryEntry
from davbrowse.webdav.parser import create_parser
from davbrowse.webdav.protocol import DirectoryLister

logger = logging.getLogger(__name__)

Transition = tuple[NavigationState, list[Message]]
LocalListerFactory = Callable[[NavigationState], DirectoryLister]


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


def navigate(state: NavigationState, path: str) -> Transition:
    state = begin_navigation(state, path)
    if not state.is_configured:
        return apply_failure(state, state.pending_path, NOT_CONFIGURED), []
    return state, [events.propfind(state.pending_path)]


def open_entry(state: NavigationState, entry: DirectoryEntry) -> Transition:
    if entry.is_directory:
        return navigate(state, resolve_entry_path(entry.href, state.server_root))
    return state, [events.play_file(entry.href, entry.name)]


def open_breadcrumb(state: NavigationState, index: int) -> Transition:
    crumb = state.breadcrumbs()[index]
    if not crumb.clickable:
        return state, []
    return navigate(state, crumb.path)


def reduce(state: NavigationState, message: Message) -> Transition:
    payload = message.payload
    if message.name is MessageName.CONFIG:
        fresh = NavigationState.from_config(payload)
        if not fresh.is_configured:
            logger.info("Server not configured")
            return fresh, []
        return navigate(fresh, fresh.start_path)

    if message.name is MessageName.PROPFIND_RESULT:
        path = str(payload.get("path") or "/")
        return apply_listing(state, path, events.entries_from_payload(payload)), []

    if message.name is MessageName.PROPFIND_ERROR:
        path = str(payload.get("path") or "/")
        return apply_failure(state, path, str(payload.get("message") or "Unknown error")), []

    logger.debug("UI ignores %s", message.name.value)
    return state, []


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


def direct_lister_factory(parser: str = "xml", timeout: float = 15.0) -> LocalListerFactory:
    """Factory for direct mode: an httpx lister built from the UI's own state."""

    def _factory(state: NavigationState) -> DirectoryLister:
        return HttpDirectoryLister(
            server_url=state.server_root,
            username=state.username,
            password=state.password,
            parser=create_parser(parser),
            media_extensions=state.media_extensions,
            timeout=timeout,
        )

    return _factory


class UISession:
    """One UI load. State lives only as long as the session."""

    def __init__(self, bus: MessageBus, lister_factory: LocalListerFactory | None = None):
        self.bus = bus
        self._lister_factory = lister_factory
        self._state = NavigationState()
        self._listeners: list[Callable[[NavigationState], None]] = []
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state.status is ViewStatus.LOADING

    @property
    def delegated(self) -> bool:
        return self._lister_factory is None

    def subscribe(self, listener: Callable[[NavigationState], None]) -> None:
        self._listeners.append(listener)

    def register(self) -> None:
        for name in (MessageName.CONFIG, MessageName.PROPFIND_RESULT, MessageName.PROPFIND_ERROR):
            self.bus.on(name, self.handle)

    def start(self) -> None:
        """Ask the host for configuration; navigation starts when it arrives."""
        self.bus.post(events.get_config())

    async def handle(self, message: Message) -> None:
        self._apply(reduce(self._state, message))

    def navigate(self, path: str) -> None:
        self._apply(navigate(self._state, path))

    def open_entry(self, entry: DirectoryEntry) -> None:
        self._apply(open_entry(self._state, entry))

    def open_breadcrumb(self, index: int) -> None:
        self._apply(open_breadcrumb(self._state, index))

    async def settle(self) -> None:
        """Wait for direct-mode listings still in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _apply(self, transition: Transition) -> None:
        state, outgoing = transition
        if state is not self._state:
            self._state = state
            for listener in self._listeners:
                try:
                    listener(state)
                except Exception:
                    logger.exception("State listener failed")
        for message in outgoing:
            self._route(message)

    def _route(self, message: Message) -> None:
        if message.name is MessageName.PROPFIND and not self.delegated:
            task = asyncio.create_task(self._list_locally(message.payload["path"]))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return
        self.bus.post(message)

    async def _list_locally(self, path: str) -> None:
        try:
            lister = self._lister_factory(self._state)
            entries = await lister.list_directory(path)
        except WebDAVError as e:
            reply = events.propfind_error(path, error_token(e))
        except Exception as e:
            logger.exception("Local listing of %s crashed", path)
            reply = events.propfind_error(path, str(e) or e.__class__.__name__)
        else:
            reply = events.propfind_result(path, entries)
        await self.handle(reply)
