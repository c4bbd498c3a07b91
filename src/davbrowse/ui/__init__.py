"""Sandboxed UI side: turns bus messages into navigation state."""

from davbrowse.ui.session import UISession, direct_lister_factory, reduce

__all__ = ["UISession", "direct_lister_factory", "reduce"]
