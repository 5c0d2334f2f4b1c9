from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from vaultpreview.viewer.models import PreviewKind
from vaultpreview.viewer.scroll import PageBox, Viewport

KEYDOWN = "keydown"
SCROLL = "scroll"

Listener = Callable[..., None]


class ViewerSurface(ABC):
    """The host UI the controller drives: event sources, layout geometry, and scrolling."""

    @abstractmethod
    def add_listener(self, event: str, handler: Listener) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_listener(self, event: str, handler: Listener) -> None:
        raise NotImplementedError

    @abstractmethod
    def page_boxes(self) -> list[PageBox]:
        """Laid-out pages in ascending order, relative to the scroll container."""
        raise NotImplementedError

    @abstractmethod
    def viewport(self) -> Viewport:
        raise NotImplementedError

    @abstractmethod
    def scroll_to_page(self, page: int) -> None:
        """Start a smooth scroll bringing `page` to the top of the container."""
        raise NotImplementedError

    @abstractmethod
    def apply_scale(self, scale: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_background_scroll_locked(self, locked: bool) -> None:
        raise NotImplementedError


class RenderTask(ABC):
    @abstractmethod
    def cancel(self) -> None:
        raise NotImplementedError


class DocumentRenderer(ABC):
    """
    Loads a document from `url` asynchronously.

    The renderer reports back through the controller's `on_render_started`,
    `on_render_success` and `on_render_error`, always passing the `session_id` it was given.
    """

    @abstractmethod
    def load(self, url: str, kind: PreviewKind, session_id: int) -> RenderTask:
        raise NotImplementedError
