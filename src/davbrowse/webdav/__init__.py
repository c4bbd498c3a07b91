"""WebDAV PROPFIND handling: request building, transports and parsing."""

from davbrowse.webdav.client import CurlDirectoryLister, HttpDirectoryLister, create_lister
from davbrowse.webdav.errors import (
    AuthFailedError,
    HttpStatusError,
    NotConfiguredError,
    TransportError,
    WebDAVError,
)
from davbrowse.webdav.models import DirectoryEntry
from davbrowse.webdav.parser import RegexResponseParser, XmlResponseParser, create_parser

__all__ = [
    "AuthFailedError",
    "CurlDirectoryLister",
    "DirectoryEntry",
    "HttpDirectoryLister",
    "HttpStatusError",
    "NotConfiguredError",
    "RegexResponseParser",
    "TransportError",
    "WebDAVError",
    "XmlResponseParser",
    "create_lister",
    "create_parser",
]
