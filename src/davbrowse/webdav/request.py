# PROPFIND request builder — URL, headers, body and curl arguments.
# Created: 2026-03-02

from __future__ import annotations

import base64
from urllib.parse import urlsplit

PROPFIND_BODY = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<D:propfind xmlns:D="DAV:">\n'
    "  <D:prop>\n"
    "    <D:displayname/>\n"
    "    <D:getcontentlength/>\n"
    "    <D:getcontenttype/>\n"
    "    <D:getlastmodified/>\n"
    "    <D:resourcetype/>\n"
    "  </D:prop>\n"
    "</D:propfind>"
)

SUCCESS_STATUSES = frozenset({200, 207})

# Appended by curl after the body so the status survives stdout capture.
STATUS_WRITE_OUT = "\n%{http_code}"


def collection_path(path: str) -> str:
    """Leading and trailing slash, so servers treat it as a collection."""
    path = path or "/"
    if not path.startswith("/"):
        path = "/" + path
    if not path.endswith("/"):
        path += "/"
    return path


def build_propfind_url(server_root: str, path: str) -> str:
    """Join root and path with exactly one slash at the seam."""
    return server_root.rstrip("/") + collection_path(path)


def request_base_path(url: str) -> str:
    """Server-side path of a request URL, as hrefs in the response see it."""
    return urlsplit(url).path or "/"


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


def propfind_headers(username: str = "", password: str = "") -> dict[str, str]:
    headers = {
        "Depth": "1",
        "Content-Type": "application/xml; charset=utf-8",
    }
    if username:
        headers["Authorization"] = basic_auth_header(username, password)
    return headers


def build_curl_args(
    url: str,
    username: str = "",
    password: str = "",
    curl_path: str = "curl",
    timeout: float | None = None,
) -> list[str]:
    """Argument vector for the external HTTP client.

    Silent, fail-fast on connection errors (but not on HTTP errors, the
    status is read from the trailing line), PROPFIND with the standard
    headers and body.
    """
    args = [
        curl_path,
        "--silent",
        "--show-error",
        "--request",
        "PROPFIND",
        "--header",
        "Depth: 1",
        "--header",
        "Content-Type: application/xml; charset=utf-8",
        "--data-binary",
        PROPFIND_BODY,
        "--write-out",
        STATUS_WRITE_OUT,
    ]
    if timeout:
        args += ["--max-time", f"{timeout:g}"]
    if username:
        args += ["--user", f"{username}:{password}"]
    args.append(url)
    return args


def split_status_line(output: str) -> tuple[int, str]:
    """Split curl output into (status, body).

    A missing or non-numeric trailing line yields status 0.
    """
    body, sep, last = output.rstrip("\r\n").rpartition("\n")
    if not sep:
        # Single line: either just the status or a body with no status
        body, last = "", output.strip()
        if not last.isdigit():
            return 0, output
    last = last.strip()
    if not last.isdigit():
        return 0, output
    return int(last), body
