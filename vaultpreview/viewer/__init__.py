"""
Headless document viewer: page/zoom/scroll state for the inline preview.

`ViewerController` drives a host `ViewerSurface` and a `DocumentRenderer`; the zoom and
scroll helpers are pure functions usable on their own.
"""

from vaultpreview.viewer.controller import ViewerController, content_url
from vaultpreview.viewer.models import (
    DocumentHandle,
    LoadingPhase,
    PreviewKind,
    RenderCancelled,
    RenderFailure,
    ViewerSnapshot,
    ViewerState,
)
from vaultpreview.viewer.scroll import PageBox, Viewport, next_current_page, page_from_scroll
from vaultpreview.viewer.zoom import ZOOM_LEVELS, zoom_in, zoom_out

__all__ = [
    "DocumentHandle",
    "LoadingPhase",
    "PageBox",
    "PreviewKind",
    "RenderCancelled",
    "RenderFailure",
    "ViewerController",
    "ViewerSnapshot",
    "ViewerState",
    "Viewport",
    "ZOOM_LEVELS",
    "content_url",
    "next_current_page",
    "page_from_scroll",
    "zoom_in",
    "zoom_out",
]
