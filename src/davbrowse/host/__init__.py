"""Privileged host side: network access, playback and configuration."""

from davbrowse.host.player import CommandPlayer, resolve_play_url
from davbrowse.host.service import HostService

__all__ = ["CommandPlayer", "HostService", "resolve_play_url"]
