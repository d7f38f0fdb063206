"""
Viewport math - clamping, anchored zoom and frame composition.

Everything here is pure: functions take the current state and return new
state, so the controller stays the only place that holds a viewport.
"""
import numpy as np
from dataclasses import dataclass, replace
from typing import Tuple

# Wheel step multiplier
ZOOM_FACTOR = 1.1


@dataclass(frozen=True)
class Bounds:
    """Static limits for one surface/content pair."""
    surface_width: float
    surface_height: float
    content_width: float
    content_height: float
    min_scale: float
    max_scale: float
    clamped: bool = True

    @classmethod
    def for_content(cls, surface_width, surface_height, content_width, content_height,
                    min_scale=1.0, clamped=True):
        """Derive bounds so that the widest view shows the full content width."""
        return cls(
            surface_width=float(surface_width),
            surface_height=float(surface_height),
            content_width=float(content_width),
            content_height=float(content_height),
            min_scale=float(min_scale),
            max_scale=float(content_width) / float(surface_width),
            clamped=clamped,
        )


@dataclass(frozen=True)
class Viewport:
    """Top-left corner in content coordinates plus content pixels per surface pixel."""
    x: float
    y: float
    scale: float


@dataclass(frozen=True)
class PointerPosition:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class DragOffset:
    dx: float = 0.0
    dy: float = 0.0


@dataclass(frozen=True)
class SourceRect:
    """Content-space rectangle the renderer samples for one frame."""
    x: float
    y: float
    width: float
    height: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


def limit_value(value, low, high):
    """Clamp value into [low, high]; low wins when the range is inverted."""
    return max(low, min(high, value))


def clamp_viewport(viewport: Viewport, bounds: Bounds) -> Viewport:
    """Keep the viewport inside the content and the scale inside its range."""
    if not bounds.clamped:
        return viewport

    scale = limit_value(viewport.scale, bounds.min_scale, bounds.max_scale)
    x = limit_value(viewport.x, 0.0, bounds.content_width - bounds.surface_width * scale)
    y = limit_value(viewport.y, 0.0, bounds.content_height - bounds.surface_height * scale)
    return Viewport(x, y, scale)


def zoom_viewport(viewport: Viewport, bounds: Bounds, anchor: PointerPosition,
                  wheel_delta: float, zoom_factor: float = ZOOM_FACTOR) -> Viewport:
    """
    Zoom one wheel step while keeping the content point under the anchor fixed.

    Positive deltas grow the scale (zoom out), negative deltas shrink it.
    When the clamp has to move the result, staying inside the content takes
    priority over keeping the anchor still.
    """
    if zoom_factor <= 1.0:
        raise ValueError(f"zoom_factor must be greater than 1, got {zoom_factor}")
    if wheel_delta == 0:
        return viewport

    direction = 1 if wheel_delta > 0 else -1
    new_scale = viewport.scale * zoom_factor ** direction

    # Content point under the anchor at the old scale
    content_x, content_y = surface_to_content(viewport, anchor)

    candidate = Viewport(
        x=content_x - anchor.x * new_scale,
        y=content_y - anchor.y * new_scale,
        scale=new_scale,
    )
    return clamp_viewport(candidate, bounds)


def translate_viewport(viewport: Viewport, offset: DragOffset) -> Viewport:
    """Shift the origin by a content-space offset."""
    return replace(viewport, x=viewport.x + offset.dx, y=viewport.y + offset.dy)


def compose(viewport: Viewport, preview: DragOffset, bounds: Bounds) -> SourceRect:
    """Combine the committed viewport and the live drag preview."""
    return SourceRect(
        x=viewport.x + preview.dx,
        y=viewport.y + preview.dy,
        width=bounds.surface_width * viewport.scale,
        height=bounds.surface_height * viewport.scale,
    )


def surface_to_content(viewport: Viewport, point: PointerPosition) -> Tuple[float, float]:
    """Convert surface coordinates to content coordinates."""
    return (viewport.x + point.x * viewport.scale,
            viewport.y + point.y * viewport.scale)


def get_transform_matrix(viewport: Viewport) -> np.ndarray:
    """Get the homogeneous surface-to-content matrix."""
    return np.array([
        [viewport.scale, 0, viewport.x],
        [0, viewport.scale, viewport.y],
        [0, 0, 1]
    ], dtype=float)
