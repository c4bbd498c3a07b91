"""Host-side message handlers.

Created: 2026-03-06

The host owns network access, the preferences and the player. It answers:
- get-config  -> config
- propfind    -> propfind-result | propfind-error
- play-file   -> (starts the player, no reply)
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from davbrowse.bus import events
from davbrowse.bus.events import Message, MessageName
from davbrowse.bus.queue import MessageBus
from davbrowse.config import Settings, get_settings
from davbrowse.host.player import CommandPlayer, PlaybackError, PlayerProtocol, resolve_play_url
from davbrowse.webdav.client import create_lister
from davbrowse.webdav.errors import WebDAVError, error_token
from davbrowse.webdav.protocol import DirectoryLister

logger = logging.getLogger(__name__)

ListerFactory = Callable[[Settings], DirectoryLister]


class HostService:
    """Serves UI requests over the bus.

    Settings are re-read for every request so preference edits take effect
    on the next navigation.
    """

    def __init__(
        self,
        bus: MessageBus,
        settings_provider: Callable[[], Settings] = get_settings,
        lister_factory: ListerFactory = create_lister,
        player: PlayerProtocol | None = None,
    ):
        self.bus = bus
        self._settings = settings_provider
        self._lister_factory = lister_factory
        self._player = player

    @property
    def player(self) -> PlayerProtocol:
        if self._player is None:
            self._player = CommandPlayer(self._settings().player_command)
        return self._player

    def register(self) -> None:
        self.bus.on(MessageName.GET_CONFIG, self.handle_get_config)
        self.bus.on(MessageName.PROPFIND, self.handle_propfind)
        self.bus.on(MessageName.PLAY_FILE, self.handle_play_file)

    def push_config(self) -> None:
        """Send the current configuration without being asked."""
        self.bus.post(events.config(self._settings().to_config_payload()))

    async def handle_get_config(self, message: Message) -> None:
        self.push_config()

    async def handle_propfind(self, message: Message) -> None:
        path = str(message.payload.get("path") or "/")
        settings = self._settings()
        try:
            lister = self._lister_factory(settings)
            entries = await lister.list_directory(path)
        except WebDAVError as e:
            logger.warning("propfind %s failed: %s", path, e)
            self.bus.post(events.propfind_error(path, error_token(e)))
            return
        except Exception as e:
            logger.exception("propfind %s crashed", path)
            self.bus.post(events.propfind_error(path, str(e) or e.__class__.__name__))
            return
        self.bus.post(events.propfind_result(path, entries))

    async def handle_play_file(self, message: Message) -> None:
        href = str(message.payload.get("href") or "")
        name = str(message.payload.get("name") or href)
        if not href:
            logger.warning("play-file without href ignored")
            return

        settings = self._settings()
        url = resolve_play_url(href, settings.server_url, settings.username, settings.password)
        try:
            await self.player.play(url, name)
        except PlaybackError as e:
            logger.error("Playback of %s failed: %s", name, e)
