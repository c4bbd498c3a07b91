"""davbrowse - a minimal WebDAV media browser.

Lists WebDAV collections with PROPFIND, filters them down to folders and
playable media, and drives a breadcrumb navigation state machine. The UI side
and the privileged host side talk over an asynchronous message bus.
"""

from davbrowse.webdav.models import DirectoryEntry

__version__ = "0.1.0"

__all__ = ["DirectoryEntry", "__version__"]
