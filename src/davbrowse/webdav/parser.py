"""Multi-status response parsing.

Created: 2026-03-02

Two strategies share one contract:
- XmlResponseParser walks an ElementTree.
- RegexResponseParser scans the raw text, for environments without an XML
  parser. XmlResponseParser also falls back to it when the body is not
  well-formed, so both strategies return the same entries for it.

Both match element names case-insensitively and ignore the namespace prefix
(``d:``, ``D:``, ``lp1:``...). Both treat an href ending in ``/`` as a
collection when the response carries no ``resourcetype`` at all.
"""

from __future__ import annotations

import html
import logging
import re
import unicodedata
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from davbrowse.webdav.models import DirectoryEntry

logger = logging.getLogger(__name__)


@dataclass
class RawResponse:
    """Fields pulled out of one <response> block, before normalization."""

    href: str
    display_name: str = ""
    has_resource_type: bool = False
    is_collection: bool = False
    content_length: str = ""
    content_type: str = ""
    last_modified: str = ""


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _href_path(href: str) -> str:
    if href.startswith(("http://", "https://")):
        try:
            return urlsplit(href).path
        except ValueError:
            return href
    return href


def normalize_for_compare(path: str) -> str:
    """Percent-decoded, trailing-slash-stripped form used for self detection."""
    return unquote(_href_path(path)).rstrip("/")


def is_self_entry(href: str, base_path: str) -> bool:
    return normalize_for_compare(href) == normalize_for_compare(base_path)


def derive_name(display_name: str, href: str) -> str:
    """Display name, else the last non-empty decoded segment of the href."""
    if display_name:
        return display_name
    segments = [s for s in _href_path(href).split("/") if s]
    return unquote(segments[-1]) if segments else ""


_LEADING_INT_RE = re.compile(r"\s*\+?(\d+)")


def parse_size(value: str | None) -> int:
    """Byte count from getcontentlength; anything unusable is 0."""
    if not value:
        return 0
    m = _LEADING_INT_RE.match(value)
    return int(m.group(1)) if m else 0


def collation_key(name: str) -> tuple[str, str, str]:
    """Locale-style ordering: letters first, then accents, then case.

    "a" < "A" < "á" < "b", close to what a browser's localeCompare does.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    return base, unicodedata.normalize("NFC", name).casefold(), name.swapcase()


def sort_entries(entries: Iterable[DirectoryEntry]) -> list[DirectoryEntry]:
    """Directories first, then by collation key. Stable."""
    return sorted(entries, key=lambda e: (not e.is_directory, collation_key(e.name)))


class BaseResponseParser(ABC):
    """Common normalization on top of a strategy-specific extractor."""

    name: str = ""

    @abstractmethod
    def extract(self, body: str) -> Iterator[RawResponse]:
        """Yield one RawResponse per <response> block, in document order."""
        ...

    def parse(
        self,
        body: str,
        base_path: str,
        media_extensions: frozenset[str] = frozenset(),
    ) -> list[DirectoryEntry]:
        entries: list[DirectoryEntry] = []
        for raw in self.extract(body or ""):
            href = raw.href.strip()
            if not href:
                logger.debug("Skipping response block without href")
                continue
            if is_self_entry(href, base_path):
                continue

            if raw.has_resource_type:
                is_directory = raw.is_collection
            else:
                is_directory = href.endswith("/")

            entry = DirectoryEntry(
                name=derive_name(raw.display_name.strip(), href),
                href=href,
                is_directory=is_directory,
                size=0 if is_directory else parse_size(raw.content_length),
                content_type=raw.content_type.strip(),
                last_modified=raw.last_modified.strip(),
            )
            entries.append(entry.with_media_extensions(media_extensions))
        return sort_entries(entries)


# ---------------------------------------------------------------------------
# ElementTree strategy
# ---------------------------------------------------------------------------


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        # Comments and processing instructions
        return ""
    return tag.rsplit("}", 1)[-1].rsplit(":", 1)[-1].lower()


def _text(el: ET.Element) -> str:
    return "".join(el.itertext())


class XmlResponseParser(BaseResponseParser):
    """Structured parse with xml.etree."""

    name = "xml"

    def extract(self, body: str) -> Iterator[RawResponse]:
        try:
            root = ET.fromstring(body.strip())
        except ET.ParseError as e:
            # Regex extraction tolerates damage inside single entries
            logger.warning("Malformed multi-status body (%s), scanning as text", e)
            yield from RegexResponseParser().extract(body)
            return

        for resp in root.iter():
            if _local_name(resp.tag) != "response":
                continue
            yield self._read_response(resp)

    @staticmethod
    def _read_response(resp: ET.Element) -> RawResponse:
        raw = RawResponse(href="")
        for el in resp.iter():
            local = _local_name(el.tag)
            if local == "href" and not raw.href:
                raw.href = _text(el)
            elif local == "displayname" and not raw.display_name.strip():
                raw.display_name = _text(el)
            elif local == "getcontentlength" and not raw.content_length.strip():
                raw.content_length = _text(el)
            elif local == "getcontenttype" and not raw.content_type.strip():
                raw.content_type = _text(el)
            elif local == "getlastmodified" and not raw.last_modified.strip():
                raw.last_modified = _text(el)
            elif local == "resourcetype":
                raw.has_resource_type = True
                if any(_local_name(child.tag) == "collection" for child in el.iter()):
                    raw.is_collection = True
        return raw


# ---------------------------------------------------------------------------
# Regex strategy
# ---------------------------------------------------------------------------

_FLAGS = re.IGNORECASE | re.DOTALL
_RESPONSE_RE = re.compile(r"<(?:[\w.-]+:)?response\b[^>]*>(.*?)</(?:[\w.-]+:)?response\s*>", _FLAGS)
_RESOURCETYPE_RE = re.compile(
    r"<(?:[\w.-]+:)?resourcetype\b[^>]*?(?:/>|>(.*?)</(?:[\w.-]+:)?resourcetype\s*>)", _FLAGS
)
_COLLECTION_RE = re.compile(r"<(?:[\w.-]+:)?collection\b", _FLAGS)
_CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")

_PROPERTY_RES: dict[str, re.Pattern[str]] = {
    prop: re.compile(
        rf"<(?:[\w.-]+:)?{prop}\b[^>]*?(?:/>|>(.*?)</(?:[\w.-]+:)?{prop}\s*>)", _FLAGS
    )
    for prop in ("href", "displayname", "getcontentlength", "getcontenttype", "getlastmodified")
}


def _decode_text(fragment: str) -> str:
    """Inner text of a matched element: CDATA kept, tags dropped, entities resolved."""
    cdata: list[str] = []

    def _stash(m: re.Match) -> str:
        cdata.append(m.group(1))
        return f"\x00{len(cdata) - 1}\x00"

    text = _TAG_RE.sub("", _CDATA_RE.sub(_stash, fragment))
    text = html.unescape(text)
    for i, chunk in enumerate(cdata):
        text = text.replace(f"\x00{i}\x00", chunk)
    return text


def _first_value(pattern: re.Pattern[str], block: str) -> str:
    for m in pattern.finditer(block):
        value = _decode_text(m.group(1) or "")
        if value.strip():
            return value
    return ""


class RegexResponseParser(BaseResponseParser):
    """Pattern scan over the raw text, no XML parser involved."""

    name = "regex"

    def extract(self, body: str) -> Iterator[RawResponse]:
        for m in _RESPONSE_RE.finditer(body):
            block = m.group(1)
            raw = RawResponse(
                href=_first_value(_PROPERTY_RES["href"], block),
                display_name=_first_value(_PROPERTY_RES["displayname"], block),
                content_length=_first_value(_PROPERTY_RES["getcontentlength"], block),
                content_type=_first_value(_PROPERTY_RES["getcontenttype"], block),
                last_modified=_first_value(_PROPERTY_RES["getlastmodified"], block),
            )
            for rt in _RESOURCETYPE_RE.finditer(block):
                raw.has_resource_type = True
                if rt.group(1) and _COLLECTION_RE.search(rt.group(1)):
                    raw.is_collection = True
            yield raw


_PARSERS: dict[str, type[BaseResponseParser]] = {
    XmlResponseParser.name: XmlResponseParser,
    RegexResponseParser.name: RegexResponseParser,
}


def create_parser(name: str = "xml") -> BaseResponseParser:
    """Parser by strategy name ("xml" or "regex")."""
    try:
        return _PARSERS[name]()
    except KeyError:
        raise ValueError(f"Unknown parser: {name!r}") from None
