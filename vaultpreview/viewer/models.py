from __future__ import annotations

import enum
from dataclasses import dataclass

from vaultpreview.services.error_normalizer import NormalizedError
from vaultpreview.viewer.zoom import DEFAULT_ZOOM_INDEX


class LoadingPhase(str, enum.Enum):
    IDLE = "idle"
    OPENING = "opening"
    RENDERING = "rendering"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


OPEN_PHASES = frozenset({LoadingPhase.OPENING, LoadingPhase.RENDERING, LoadingPhase.READY, LoadingPhase.FAILED})


class PreviewKind(str, enum.Enum):
    PDF = "pdf"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class DocumentHandle:
    id: str
    display_name: str = ""
    mime_type: str = ""

    @property
    def preview_kind(self) -> PreviewKind:
        mime = (self.mime_type or "").lower()
        if mime == "application/pdf" or (self.display_name or "").lower().endswith(".pdf"):
            return PreviewKind.PDF
        if mime.startswith("image/"):
            return PreviewKind.IMAGE
        return PreviewKind.UNSUPPORTED


@dataclass
class ViewerState:
    current_page: int = 1
    total_pages: int | None = None
    zoom_index: int = DEFAULT_ZOOM_INDEX
    loading_phase: LoadingPhase = LoadingPhase.IDLE
    last_error: NormalizedError | None = None


@dataclass(frozen=True)
class ViewerSnapshot:
    page: int
    total_pages: int | None
    zoom_percent: int
    loading_phase: LoadingPhase
    error: NormalizedError | None


class RenderFailure(Exception):
    """The renderer could not display the document (malformed or unsupported content)."""


class RenderCancelled(Exception):
    """A render was superseded (page or zoom changed, document closed). Expected; never surfaced."""


def is_expected_cancellation(error: object) -> bool:
    if isinstance(error, RenderCancelled):
        return True
    if not isinstance(error, BaseException):
        return False
    # pdf.js-style renderers report a superseded text layer as AbortException or by message only.
    message = str(error)
    if "TextLayer task cancelled" in message:
        return True
    return type(error).__name__ == "AbortException" and "TextLayer" in message
