"""davbrowse entry point.

Changes:
  - 2026-03-12: Added `browse` (runs UI and host over the message bus).
  - 2026-03-08: Added --transport/--parser overrides for `list`.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from davbrowse.browser.formatting import filter_visible, format_size
from davbrowse.browser.state import NavigationState, ViewStatus, status_message
from davbrowse.bus.queue import MessageBus
from davbrowse.config import Settings, get_settings
from davbrowse.host.player import CommandPlayer, PlaybackError, resolve_play_url
from davbrowse.host.service import HostService
from davbrowse.logging_setup import setup_logging
from davbrowse.ui.session import UISession
from davbrowse.webdav.client import create_lister
from davbrowse.webdav.errors import WebDAVError, user_message
from davbrowse.webdav.models import DirectoryEntry

logger = logging.getLogger(__name__)


def _format_entry(entry: DirectoryEntry) -> str:
    kind = "DIR " if entry.is_directory else "FILE"
    size = format_size(entry.size)
    return f"{kind} {entry.name}" + (f"  ({size})" if size else "")


def _print_state(state: NavigationState) -> None:
    print(" > ".join(c.label for c in state.breadcrumbs()))
    message = status_message(state)
    if message:
        print(message)
    for entry in state.entries:
        print(f"  {_format_entry(entry)}")


def _settings_for(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    overrides = {}
    if getattr(args, "transport", None):
        overrides["transport"] = args.transport
    if getattr(args, "parser", None):
        overrides["parser"] = args.parser
    return settings.model_copy(update=overrides) if overrides else settings


async def run_list(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    path = args.path or settings.start_path
    try:
        entries = await create_lister(settings).list_directory(path)
    except WebDAVError as e:
        print(user_message(e), file=sys.stderr)
        return 1

    if not args.all:
        entries = filter_visible(entries, settings.media_extensions)
    print(f"{settings.server_root}{path}")
    for entry in entries:
        print(f"  {_format_entry(entry)}")
    return 0


async def run_play(args: argparse.Namespace) -> int:
    settings = get_settings()
    url = resolve_play_url(args.href, settings.server_url, settings.username, settings.password)
    try:
        await CommandPlayer(settings.player_command).play(url, args.name or args.href)
    except PlaybackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


async def run_browse(args: argparse.Namespace) -> int:
    bus = MessageBus()
    host = HostService(bus, settings_provider=lambda: _settings_for(args))
    ui = UISession(bus)
    host.register()
    ui.register()

    await bus.start()
    try:
        ui.start()
        await bus.drain()
        if args.path:
            ui.navigate(args.path)
            await bus.drain()
    finally:
        await bus.stop()

    _print_state(ui.state)
    failed = ui.state.status is ViewStatus.ERROR or not ui.state.is_configured
    return 1 if failed else 0


def run_config(args: argparse.Namespace) -> int:
    payload = get_settings().to_config_payload()
    if payload["password"]:
        payload["password"] = "********"
    for key, value in payload.items():
        print(f"{key:16} {value}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="davbrowse",
        description="Browse a WebDAV share for folders and videos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  davbrowse list /Movies              List folders and videos in /Movies
  davbrowse list --all --parser regex List everything, regex parser
  davbrowse browse /Shows             Browse through the host/UI message bus
  davbrowse play /webdav/a/film.mkv   Open a file in the configured player
""",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    list_parser = sub.add_parser("list", help="List one collection")
    list_parser.add_argument("path", nargs="?", help="Collection path (default: start path)")
    list_parser.add_argument("--all", action="store_true", help="Include non-media files")
    list_parser.add_argument("--transport", choices=["direct", "curl"])
    list_parser.add_argument("--parser", choices=["xml", "regex"])

    browse_parser = sub.add_parser("browse", help="Run a delegated UI session")
    browse_parser.add_argument("path", nargs="?", help="Navigate here after the start path")
    browse_parser.add_argument("--transport", choices=["direct", "curl"])
    browse_parser.add_argument("--parser", choices=["xml", "regex"])

    play_parser = sub.add_parser("play", help="Play a file by href")
    play_parser.add_argument("href")
    play_parser.add_argument("--name", help="Name shown while playing")

    sub.add_parser("config", help="Show the configuration sent to the UI")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)

    if args.command == "config":
        return run_config(args)
    runners = {"list": run_list, "browse": run_browse, "play": run_play}
    return asyncio.run(runners[args.command](args))


if __name__ == "__main__":
    sys.exit(main())
