from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class PageBox:
    page: int
    top: float
    height: float

    @property
    def center(self) -> float:
        return self.top + self.height / 2


@dataclass(frozen=True)
class Viewport:
    scroll_top: float
    visible_height: float

    @property
    def center(self) -> float:
        return self.scroll_top + self.visible_height / 2


def page_from_scroll(pages: Iterable[PageBox], viewport: Viewport) -> int | None:
    """
    Page whose vertical center is closest to the viewport's center.

    `pages` must be in ascending page order. On an exact tie the earlier page wins
    (strict `<`), which keeps the indicator from jumping ahead at page boundaries.
    Returns None when there are no pages.
    """
    target = viewport.center
    best_page: int | None = None
    best_distance = float("inf")
    for box in pages:
        distance = abs(target - box.center)
        if distance < best_distance:
            best_distance = distance
            best_page = box.page
    return best_page


def next_current_page(current: int, pages: Iterable[PageBox], viewport: Viewport) -> int:
    page = page_from_scroll(pages, viewport)
    if page is None or page == current:
        return current
    return page
