from __future__ import annotations

import dataclasses
import itertools
import logging
import urllib.parse
from typing import Any, Callable

from vaultpreview.services.error_normalizer import normalize_error
from vaultpreview.viewer.models import (
    OPEN_PHASES,
    DocumentHandle,
    LoadingPhase,
    PreviewKind,
    RenderFailure,
    ViewerSnapshot,
    ViewerState,
    is_expected_cancellation,
)
from vaultpreview.viewer.scroll import next_current_page
from vaultpreview.viewer.surface import KEYDOWN, SCROLL, DocumentRenderer, RenderTask, ViewerSurface
from vaultpreview.viewer.zoom import ZOOM_LEVELS, zoom_in, zoom_index, zoom_out, zoom_percent

logger = logging.getLogger(__name__)

NO_SESSION = 0


def content_url(document_id: str, *, prefix: str = "/api") -> str:
    """Same-origin proxy URL for a document; the signed storage URL is never used client-side."""
    return f"{prefix.rstrip('/')}/content/{urllib.parse.quote(document_id, safe='')}"


class ViewerController:
    """
    Page/zoom/scroll state for one document preview at a time.

    Every `open` starts a new session id. Render tasks and their callbacks carry the id they
    were issued under; callbacks for any other id are dropped, so a slow render of a previous
    document can never touch the state of the current one.
    """

    def __init__(
        self,
        surface: ViewerSurface,
        renderer: DocumentRenderer,
        *,
        content_url_prefix: str = "/api",
    ):
        self._surface = surface
        self._renderer = renderer
        self._content_url_prefix = content_url_prefix
        self._state = ViewerState()
        self._document: DocumentHandle | None = None
        self._session_counter = itertools.count(1)
        self._session_id = NO_SESSION
        self._tasks: list[RenderTask] = []
        self._listeners: list[tuple[str, Callable[..., None]]] = []
        self._background_locked = False
        self._subscribers: list[Callable[[ViewerSnapshot], None]] = []
        # Bound once so remove_listener receives the same objects add_listener did.
        self._keydown_handler = self._on_keydown
        self._scroll_handler = self._on_scroll

    # -------------------- Observable state --------------------

    @property
    def state(self) -> ViewerState:
        return dataclasses.replace(self._state)

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def scale(self) -> float:
        return ZOOM_LEVELS[self._state.zoom_index]

    @property
    def can_zoom_in(self) -> bool:
        return self.scale < ZOOM_LEVELS[-1]

    @property
    def can_zoom_out(self) -> bool:
        return self.scale > ZOOM_LEVELS[0]

    def snapshot(self) -> ViewerSnapshot:
        return ViewerSnapshot(
            page=self._state.current_page,
            total_pages=self._state.total_pages,
            zoom_percent=zoom_percent(self.scale),
            loading_phase=self._state.loading_phase,
            error=self._state.last_error,
        )

    def subscribe(self, callback: Callable[[ViewerSnapshot], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for callback in list(self._subscribers):
            callback(snap)

    # -------------------- Lifecycle --------------------

    def open(self, document: DocumentHandle) -> int:
        self._teardown()

        self._session_id = next(self._session_counter)
        self._document = document
        self._state = ViewerState(loading_phase=LoadingPhase.OPENING)

        self._surface.set_background_scroll_locked(True)
        self._background_locked = True
        self._attach_listeners()
        self._surface.apply_scale(self.scale)

        kind = document.preview_kind
        if not document.id:
            self._fail(RenderFailure("Failed to load file"))
        elif kind is PreviewKind.UNSUPPORTED:
            self._fail(RenderFailure("Preview not available for this file type"))
        else:
            url = content_url(document.id, prefix=self._content_url_prefix)
            try:
                self._tasks.append(self._renderer.load(url, kind, self._session_id))
            except Exception as exc:
                self._fail(exc)

        logger.debug("Viewer session %s opened for document %s", self._session_id, document.id)
        self._notify()
        return self._session_id

    def close(self) -> None:
        self._teardown()
        self._session_id = NO_SESSION
        self._document = None
        self._state = ViewerState(loading_phase=LoadingPhase.CLOSED)
        self._notify()

    def _teardown(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        self._detach_listeners()
        if self._background_locked:
            self._surface.set_background_scroll_locked(False)
            self._background_locked = False

    def _attach_listeners(self) -> None:
        if self._listeners:
            return
        for event, handler in ((KEYDOWN, self._keydown_handler), (SCROLL, self._scroll_handler)):
            self._surface.add_listener(event, handler)
            self._listeners.append((event, handler))

    def _detach_listeners(self) -> None:
        listeners, self._listeners = self._listeners, []
        for event, handler in listeners:
            self._surface.remove_listener(event, handler)

    # -------------------- Renderer callbacks --------------------

    def _is_current(self, session_id: int, event: str) -> bool:
        if session_id != NO_SESSION and session_id == self._session_id:
            return True
        logger.debug("Dropping %s for stale session %s (active: %s)", event, session_id, self._session_id)
        return False

    def on_render_started(self, session_id: int) -> None:
        if not self._is_current(session_id, "render start"):
            return
        if self._state.loading_phase is LoadingPhase.OPENING:
            self._state.loading_phase = LoadingPhase.RENDERING
            self._notify()

    def on_render_success(self, session_id: int, total_pages: int) -> None:
        if not self._is_current(session_id, "render success"):
            return
        if self._state.loading_phase not in (LoadingPhase.OPENING, LoadingPhase.RENDERING):
            return
        if total_pages < 1:
            self._fail(RenderFailure("Document has no pages"))
            self._notify()
            return

        self._state.total_pages = int(total_pages)
        self._state.current_page = min(self._state.current_page, self._state.total_pages)
        self._state.loading_phase = LoadingPhase.READY
        self._state.last_error = None
        self._notify()

    def on_render_error(self, session_id: int, error: Any) -> None:
        if not self._is_current(session_id, "render error"):
            return
        if is_expected_cancellation(error):
            logger.debug("Render cancelled in session %s: %s", session_id, error)
            return
        if self._state.loading_phase not in OPEN_PHASES or self._state.loading_phase is LoadingPhase.FAILED:
            return
        self._fail(error)
        self._notify()

    def _fail(self, error: Any) -> None:
        doc_id = self._document.id if self._document else ""
        logger.warning("Preview failed for document %s: %s", doc_id, error)
        self._state.loading_phase = LoadingPhase.FAILED
        self._state.last_error = normalize_error(error)

    # -------------------- Navigation --------------------

    def go_to_page(self, page: int) -> bool:
        total = self._state.total_pages
        if self._state.loading_phase is not LoadingPhase.READY or not total:
            return False
        if page < 1 or page > total:
            return False

        # Set before scrolling so the indicator does not wait for the animation.
        self._state.current_page = page
        self._notify()
        self._surface.scroll_to_page(page)
        return True

    def next_page(self) -> bool:
        total = self._state.total_pages or 1
        if self._state.current_page >= total:
            return False
        return self.go_to_page(min(total, self._state.current_page + 1))

    def previous_page(self) -> bool:
        if self._state.current_page <= 1:
            return False
        return self.go_to_page(max(1, self._state.current_page - 1))

    def zoom_in(self) -> float:
        return self._set_scale(zoom_in(self.scale))

    def zoom_out(self) -> float:
        return self._set_scale(zoom_out(self.scale))

    def _set_scale(self, scale: float) -> float:
        if self._state.loading_phase not in OPEN_PHASES or scale == self.scale:
            return self.scale
        self._state.zoom_index = zoom_index(scale)
        self._surface.apply_scale(scale)
        self._notify()
        return scale

    # -------------------- Event listeners --------------------

    def _on_keydown(self, event: Any) -> None:
        key = getattr(event, "key", event)
        state = self._state
        if key == "Escape":
            self.close()
        elif key == "ArrowLeft" and state.total_pages and state.current_page > 1:
            self.go_to_page(state.current_page - 1)
        elif key == "ArrowRight" and state.total_pages and state.current_page < state.total_pages:
            self.go_to_page(state.current_page + 1)
        elif key in ("+", "="):
            self.zoom_in()
        elif key == "-":
            self.zoom_out()

    def _on_scroll(self, event: Any = None) -> None:  # noqa: ARG002
        if self._state.loading_phase is not LoadingPhase.READY or not self._state.total_pages:
            return
        page = next_current_page(self._state.current_page, self._surface.page_boxes(), self._surface.viewport())
        if page != self._state.current_page and 1 <= page <= self._state.total_pages:
            self._state.current_page = page
            self._notify()
