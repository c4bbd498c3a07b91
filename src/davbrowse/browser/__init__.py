"""UI-side browsing: navigation state, breadcrumbs and presentation helpers."""

from davbrowse.browser.formatting import filter_visible, format_size
from davbrowse.browser.navigator import Navigator
from davbrowse.browser.state import Breadcrumb, NavigationState, ViewStatus

__all__ = [
    "Breadcrumb",
    "NavigationState",
    "Navigator",
    "ViewStatus",
    "filter_visible",
    "format_size",
]
