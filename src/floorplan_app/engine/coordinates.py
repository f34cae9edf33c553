"""Mapping between pointer positions and percentage coordinates.

Marker positions are stored as percentages of the rendered container so they
survive zooming and resizing. The functions here are pure: the same rect and
event always give the same answer.
"""
import math
from dataclasses import dataclass
from typing import NamedTuple

from ..errors import LayoutNotReady


@dataclass(frozen=True)
class Rect:
    """Bounding box of the container, in screen pixels."""
    left: float
    top: float
    width: float
    height: float

    @property
    def is_laid_out(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class PointerEvent:
    """Screen position of a pointer/mouse event."""
    client_x: float
    client_y: float


class Point(NamedTuple):
    x: float
    y: float


class PixelPosition(NamedTuple):
    left: float
    top: float


def clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _require_layout(rect: Rect):
    if not rect.is_laid_out:
        raise LayoutNotReady(f"Container has no measurable size ({rect.width}x{rect.height})")


def to_percent(event: PointerEvent, rect: Rect, rounded: bool = True) -> Point:
    """Map a pointer event to percentage coordinates inside ``rect``.

    Results are clamped to [0, 100] and, unless ``rounded`` is False, rounded
    to the nearest integer (halves round up).

    Raises:
        LayoutNotReady: ``rect`` has zero width or height.
    """
    _require_layout(rect)
    x = clamp_percent((event.client_x - rect.left) / rect.width * 100)
    y = clamp_percent((event.client_y - rect.top) / rect.height * 100)
    if rounded:
        return Point(round_half_up(x), round_half_up(y))
    return Point(x, y)


def to_pixels(percent, rect: Rect, absolute: bool = False) -> PixelPosition:
    """Map percentage coordinates back to pixels.

    By default the result is relative to the container (a CSS ``left``/``top``);
    with ``absolute`` it is in the same screen space as pointer events.

    Raises:
        LayoutNotReady: ``rect`` has zero width or height.
    """
    _require_layout(rect)
    x, y = percent
    left = clamp_percent(x) / 100 * rect.width
    top = clamp_percent(y) / 100 * rect.height
    if absolute:
        return PixelPosition(rect.left + left, rect.top + top)
    return PixelPosition(left, top)
