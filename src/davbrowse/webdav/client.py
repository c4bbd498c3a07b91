# WebDAV directory listers — direct httpx transport and curl subprocess transport.
# Created: 2026-03-02
# Changes:
#   - 2026-03-09: curl transport reads the status from a trailing --write-out line

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import httpx

from davbrowse.config import normalize_server_root
from davbrowse.webdav.errors import (
    AuthFailedError,
    HttpStatusError,
    NotConfiguredError,
    TransportError,
)
from davbrowse.webdav.models import DirectoryEntry
from davbrowse.webdav.parser import BaseResponseParser, XmlResponseParser, create_parser
from davbrowse.webdav.request import (
    PROPFIND_BODY,
    SUCCESS_STATUSES,
    build_curl_args,
    build_propfind_url,
    propfind_headers,
    request_base_path,
    split_status_line,
)

if TYPE_CHECKING:
    from davbrowse.config import Settings

logger = logging.getLogger(__name__)


def check_status(status: int, reason: str = "") -> None:
    """Raise for anything but 200/207."""
    if status == 401:
        raise AuthFailedError()
    if status not in SUCCESS_STATUSES:
        raise HttpStatusError(status, reason)


class BaseDirectoryLister(ABC):
    """PROPFIND flow shared by both transports.

    Subclasses only move bytes: ``_fetch`` returns (status, reason, body).
    """

    def __init__(
        self,
        server_url: str,
        username: str = "",
        password: str = "",
        parser: BaseResponseParser | None = None,
        media_extensions: frozenset[str] = frozenset(),
        timeout: float = 15.0,
    ):
        self.server_root = normalize_server_root(server_url)
        self.username = username or ""
        self.password = password or ""
        self.parser = parser or XmlResponseParser()
        self.media_extensions = media_extensions
        self.timeout = timeout

    @abstractmethod
    async def _fetch(self, url: str) -> tuple[int, str, str]: ...

    async def list_directory(self, path: str) -> list[DirectoryEntry]:
        if not self.server_root:
            raise NotConfiguredError()

        url = build_propfind_url(self.server_root, path)
        logger.debug("PROPFIND %s", url)
        status, reason, body = await self._fetch(url)
        check_status(status, reason)

        entries = self.parser.parse(body, request_base_path(url), self.media_extensions)
        logger.info("Listed %s: %d entries (HTTP %d)", path, len(entries), status)
        return entries


class HttpDirectoryLister(BaseDirectoryLister):
    """Issues PROPFIND in-process with httpx."""

    async def _fetch(self, url: str) -> tuple[int, str, str]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.request(
                    "PROPFIND",
                    url,
                    headers=propfind_headers(self.username, self.password),
                    content=PROPFIND_BODY.encode("utf-8"),
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("PROPFIND transport error: %s", e)
            raise TransportError(str(e) or e.__class__.__name__) from e
        return resp.status_code, resp.reason_phrase, resp.text


class CurlDirectoryLister(BaseDirectoryLister):
    """Shells out to curl for environments without direct network access."""

    def __init__(self, *args, curl_path: str = "curl", **kwargs):
        super().__init__(*args, **kwargs)
        self.curl_path = curl_path

    async def _fetch(self, url: str) -> tuple[int, str, str]:
        args = build_curl_args(
            url, self.username, self.password, curl_path=self.curl_path, timeout=self.timeout
        )
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            # curl's own --max-time normally fires first
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout + 5)
        except FileNotFoundError as e:
            raise TransportError(f"HTTP client not found: {self.curl_path}") from e
        except TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise TransportError(f"Request timed out after {self.timeout:g}s") from e
        except OSError as e:
            raise TransportError(str(e)) from e

        if proc.returncode:
            error = stderr.decode("utf-8", errors="replace").strip()
            logger.warning("curl exited with %s: %s", proc.returncode, error)
            raise TransportError(error or f"curl exited with code {proc.returncode}")

        status, body = split_status_line(stdout.decode("utf-8", errors="replace"))
        return status, "", body


def create_lister(settings: Settings, parser: BaseResponseParser | None = None):
    """Lister for the configured transport."""
    kwargs = dict(
        server_url=settings.server_url,
        username=settings.username,
        password=settings.password,
        parser=parser or create_parser(settings.parser),
        media_extensions=settings.media_extensions,
        timeout=settings.request_timeout,
    )
    if settings.transport == "curl":
        return CurlDirectoryLister(curl_path=settings.curl_path, **kwargs)
    return HttpDirectoryLister(**kwargs)
