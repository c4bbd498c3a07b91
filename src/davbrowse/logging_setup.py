# Logging setup — Rich console handler for the CLI and host process.
# Created: 2026-03-02

from __future__ import annotations

import logging
from urllib.parse import urlsplit, urlunsplit

from rich.console import Console
from rich.logging import RichHandler

_CONFIGURED = False


def setup_logging(level: str = "INFO") -> None:
    """Install a RichHandler on the root logger.

    Safe to call more than once; only the level changes on repeat calls.
    """
    global _CONFIGURED

    root = logging.getLogger()
    root.setLevel(level.upper())
    if _CONFIGURED:
        return

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)

    # httpx logs every request at INFO
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _CONFIGURED = True


def redact_url(url: str) -> str:
    """Mask inline credentials so a URL can be logged."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if parts.username is None and parts.password is None:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urlunsplit((parts.scheme, f"***@{host}", parts.path, parts.query, parts.fragment))
