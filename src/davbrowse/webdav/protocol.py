"""Listing protocols.

Created: 2026-03-02

Two capabilities with two interchangeable implementations each:
- ResponseParser: XmlResponseParser (ElementTree) / RegexResponseParser
- DirectoryLister: HttpDirectoryLister (httpx) / CurlDirectoryLister (curl)
"""

from typing import Protocol, runtime_checkable

from davbrowse.webdav.models import DirectoryEntry


@runtime_checkable
class ResponseParser(Protocol):
    """Turns a multi-status body into sorted directory entries.

    Implementations never raise on malformed input; a body that cannot be
    read at all yields an empty list.
    """

    def parse(
        self,
        body: str,
        base_path: str,
        media_extensions: frozenset[str] = frozenset(),
    ) -> list[DirectoryEntry]:
        """Parse ``body`` returned for the collection at ``base_path``."""
        ...


@runtime_checkable
class DirectoryLister(Protocol):
    """Lists one WebDAV collection."""

    async def list_directory(self, path: str) -> list[DirectoryEntry]:
        """Return the children of ``path``.

        Raises:
            NotConfiguredError: no server URL.
            TransportError: network or process failure.
            AuthFailedError: status 401.
            HttpStatusError: any other status besides 200/207.
        """
        ...
