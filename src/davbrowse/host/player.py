# Playback — resolve an entry href into a playable URL and hand it to a player.
# Created: 2026-03-06

from __future__ import annotations

import asyncio
import logging
import shlex
from typing import Protocol, runtime_checkable
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

from davbrowse.config import normalize_server_root
from davbrowse.logging_setup import redact_url

logger = logging.getLogger(__name__)


class PlaybackError(Exception):
    """The player could not be started."""


def embed_credentials(url: str, username: str, password: str = "") -> str:
    """Put user:password into the URL's netloc for players without auth headers."""
    if not username:
        return url
    parts = urlsplit(url)
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if parts.port:
        host = f"{host}:{parts.port}"
    userinfo = quote(username, safe="")
    if password:
        userinfo += ":" + quote(password, safe="")
    return urlunsplit((parts.scheme, f"{userinfo}@{host}", parts.path, parts.query, parts.fragment))


def resolve_play_url(href: str, server_url: str, username: str = "", password: str = "") -> str:
    """Absolute, credential-bearing URL for an entry href.

    http(s) hrefs are used as is; anything else is joined under the server
    root. If joining fails the href is appended to the root.
    """
    root = normalize_server_root(server_url)
    try:
        if href.startswith(("http://", "https://")):
            url = href
        else:
            url = urljoin(root + "/", href)
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"not an absolute URL: {url}")
        url = embed_credentials(url, username, password)
    except ValueError:
        url = root + (href if href.startswith("/") else "/" + href)
    return url


@runtime_checkable
class PlayerProtocol(Protocol):
    """Media playback collaborator. Nothing it returns is used."""

    async def play(self, url: str, name: str) -> None: ...


class CommandPlayer:
    """Starts an external player command with the URL as last argument.

    The player runs detached; only a failure to launch is reported.
    """

    def __init__(self, command: str = "mpv"):
        self.command = command
        self._processes: set[asyncio.subprocess.Process] = set()

    async def play(self, url: str, name: str) -> None:
        command = shlex.split(self.command)
        if not command:
            raise PlaybackError("No player command configured")
        argv = [*command, url]
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            raise PlaybackError(f"Could not start {argv[0]}: {e}") from e

        self._processes = {p for p in self._processes if p.returncode is None}
        self._processes.add(proc)
        logger.info("Playing: %s (%s)", name, redact_url(url))
        self.osd(f"Playing: {name}")

    def osd(self, text: str) -> None:
        """On-screen notice; a terminal player only gets a log line."""
        logger.info(text)
