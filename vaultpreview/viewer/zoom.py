from __future__ import annotations

ZOOM_LEVELS: tuple[float, ...] = (0.5, 0.75, 1, 1.25, 1.5, 2, 3)
DEFAULT_ZOOM = 1
DEFAULT_ZOOM_INDEX = ZOOM_LEVELS.index(DEFAULT_ZOOM)


def zoom_in(scale: float, levels: tuple[float, ...] = ZOOM_LEVELS) -> float:
    """Next ladder step above `scale`; saturates at the top."""
    for level in levels:
        if level > scale:
            return level
    return scale


def zoom_out(scale: float, levels: tuple[float, ...] = ZOOM_LEVELS) -> float:
    """Next ladder step below `scale`; saturates at the bottom."""
    for level in reversed(levels):
        if level < scale:
            return level
    return scale


def zoom_index(scale: float, levels: tuple[float, ...] = ZOOM_LEVELS) -> int:
    return levels.index(scale)


def zoom_percent(scale: float) -> int:
    return int(round(scale * 100))
