"""Configuration management for davbrowse.

Created: 2026-03-02

Settings come from ~/.davbrowse/config.json and DAVBROWSE_* environment
variables. Every field is optional; an empty server_url means the browser is
unconfigured rather than broken.
"""

from __future__ import annotations

import json
import logging
import os
import stat
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_EXTENSIONS = "mp4,mkv,avi,mov,webm,m4v,ts,flv,wmv"


def get_config_dir() -> Path:
    """Get/create the config directory (~/.davbrowse)."""
    d = Path.home() / ".davbrowse"
    d.mkdir(parents=True, exist_ok=True)
    return d


def get_config_path() -> Path:
    return get_config_dir() / "config.json"


def normalize_server_root(url: str | None) -> str:
    """Strip surrounding whitespace and every trailing slash."""
    return (url or "").strip().rstrip("/")


def parse_extensions(value: str | None) -> frozenset[str]:
    """Turn "MP4, .mkv,," into {"mp4", "mkv"}."""
    exts = set()
    for part in (value or "").split(","):
        ext = part.strip().lower().lstrip(".")
        if ext:
            exts.add(ext)
    return frozenset(exts)


class Settings(BaseSettings):
    """Browser settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAVBROWSE_",
        extra="ignore",
    )

    # WebDAV server
    server_url: str = Field(default="", description="Base URL of the WebDAV share")
    username: str = Field(default="", description="HTTP Basic username (optional)")
    password: str = Field(default="", description="HTTP Basic password (optional)")
    start_path: str = Field(default="/", description="Collection opened on startup")
    video_extensions: str = Field(
        default=DEFAULT_VIDEO_EXTENSIONS,
        description="Comma-separated media extensions, no leading dots",
    )

    # Transport
    transport: Literal["direct", "curl"] = Field(
        default="direct", description="direct = httpx, curl = external HTTP client"
    )
    parser: Literal["xml", "regex"] = Field(
        default="xml", description="Multi-status parser strategy"
    )
    delegate_network: bool = Field(
        default=False, description="UI hands PROPFIND requests to the host process"
    )
    request_timeout: float = Field(default=15.0, gt=0)
    curl_path: str = Field(default="curl")

    # Playback
    player_command: str = Field(default="mpv", description="Command that receives the URL")

    @field_validator("server_url", "username", "start_path", "video_extensions", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @property
    def server_root(self) -> str:
        return normalize_server_root(self.server_url)

    @property
    def is_configured(self) -> bool:
        return bool(self.server_root)

    @property
    def media_extensions(self) -> frozenset[str]:
        return parse_extensions(self.video_extensions)

    def to_config_payload(self) -> dict[str, str]:
        """Payload of the ``config`` message sent to the UI."""
        return {
            "serverUrl": self.server_url or "",
            "username": self.username or "",
            "password": self.password or "",
            "startPath": self.start_path or "/",
            "videoExtensions": self.video_extensions or "",
        }

    def save(self) -> None:
        """Write settings to config.json (owner-only permissions)."""
        path = get_config_path()
        path.write_text(json.dumps(self.model_dump(), indent=2))
        os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)
        logger.info("Saved settings to %s", path)

    @classmethod
    def load(cls) -> Settings:
        """Load settings from config.json, falling back to env/defaults."""
        path = get_config_path()
        if path.exists():
            try:
                data = json.loads(path.read_text())
                return cls(**data)
            except (json.JSONDecodeError, ValueError) as e:
                logger.warning("Ignoring unreadable config %s: %s", path, e)
        return cls()


@lru_cache
def _cached_settings() -> Settings:
    return Settings.load()


def get_settings(force_reload: bool = False) -> Settings:
    """Get the shared settings instance."""
    if force_reload:
        _cached_settings.cache_clear()
    return _cached_settings()
