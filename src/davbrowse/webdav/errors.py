"""WebDAV error taxonomy.

Created: 2026-03-02

Transport and status failures raise one of these; parse anomalies never do,
they are absorbed per entry by the parsers.
"""

from __future__ import annotations

from http import HTTPStatus

AUTH_FAILED = "AUTH_FAILED"
NOT_CONFIGURED = "NOT_CONFIGURED"

AUTH_FAILED_STATE_MESSAGE = "authentication failed"
NOT_CONFIGURED_STATE_MESSAGE = "server not configured"


class WebDAVError(Exception):
    """Base class for listing failures."""

    token: str | None = None


class NotConfiguredError(WebDAVError):
    """No server URL is configured."""

    token = NOT_CONFIGURED

    def __init__(self, message: str = "WebDAV server not configured") -> None:
        super().__init__(message)


class TransportError(WebDAVError):
    """Network or process-level failure; keeps the underlying message."""


class AuthFailedError(WebDAVError):
    """Server answered 401."""

    token = AUTH_FAILED

    def __init__(self) -> None:
        super().__init__(AUTH_FAILED)


class HttpStatusError(WebDAVError):
    """Any other non-success status."""

    def __init__(self, status: int, reason: str = "") -> None:
        self.status = status
        if not reason:
            try:
                reason = HTTPStatus(status).phrase
            except ValueError:
                reason = ""
        super().__init__(f"HTTP {status} {reason}".rstrip())


def error_token(exc: BaseException) -> str:
    """Wire form of an error for the ``propfind-error`` message."""
    token = getattr(exc, "token", None)
    return token or str(exc) or exc.__class__.__name__


def user_message(error: BaseException | str) -> str:
    """Display text for an error or an error token."""
    text = error_token(error) if isinstance(error, BaseException) else error
    if text == AUTH_FAILED:
        return "Authentication failed. Check credentials in preferences."
    if text == NOT_CONFIGURED:
        return "Server not configured. Set URL in plugin preferences."
    return f"Error: {text}"
