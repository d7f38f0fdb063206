"""
Drag Controller
Two-phase pan gesture: a live preview offset is recomputed every frame and
only folded into the viewport when the gesture ends. Cancelling a gesture
simply drops the preview.
"""
import logging
from dataclasses import dataclass, field

from viewport_manager import (
    Bounds,
    DragOffset,
    PointerPosition,
    Viewport,
    clamp_viewport,
    limit_value,
    translate_viewport,
)

logger = logging.getLogger(__name__)


@dataclass
class DragState:
    active: bool = False
    anchor: PointerPosition = field(default_factory=PointerPosition)
    preview: DragOffset = field(default_factory=DragOffset)


class DragEngine:
    """Idle/Dragging state machine for one surface."""

    def __init__(self):
        self.state = DragState()

        # === DEBUG/STATS ===
        self.total_gestures = 0
        self.cancelled_gestures = 0

    @property
    def is_dragging(self) -> bool:
        return self.state.active

    @property
    def preview(self) -> DragOffset:
        return self.state.preview

    def start(self, pointer: PointerPosition):
        """
        Begin a gesture at the given pointer position.

        Starting again while a gesture is active re-anchors it; the preview
        gathered so far is dropped.
        """
        if self.state.active:
            logger.debug("[Drag] Re-anchored at (%.1f, %.1f)", pointer.x, pointer.y)
        else:
            self.total_gestures += 1
            logger.debug("[Drag] Gesture started at (%.1f, %.1f)", pointer.x, pointer.y)

        self.state = DragState(active=True, anchor=pointer, preview=DragOffset())

    def update(self, pointer: PointerPosition, viewport: Viewport, bounds: Bounds) -> DragOffset:
        """Recompute the preview offset for the current pointer position."""
        if not self.state.active:
            return self.state.preview

        anchor = self.state.anchor
        dx = (anchor.x - pointer.x) * viewport.scale
        dy = (anchor.y - pointer.y) * viewport.scale

        if bounds.clamped:
            # Limits are taken against the live viewport, not a snapshot from gesture start
            dx = limit_value(dx, -viewport.x,
                             bounds.content_width - viewport.x - bounds.surface_width * viewport.scale)
            dy = limit_value(dy, -viewport.y,
                             bounds.content_height - viewport.y - bounds.surface_height * viewport.scale)

        self.state.preview = DragOffset(dx, dy)
        return self.state.preview

    def end(self, viewport: Viewport, bounds: Bounds) -> Viewport:
        """Commit the preview into the viewport and go idle."""
        if not self.state.active:
            return viewport

        committed = clamp_viewport(translate_viewport(viewport, self.state.preview), bounds)
        logger.debug("[Drag] Gesture committed by (%.2f, %.2f)",
                     self.state.preview.dx, self.state.preview.dy)
        self.state = DragState()
        return committed

    def cancel(self):
        """Abort the gesture without touching the viewport."""
        if self.state.active:
            self.cancelled_gestures += 1
            logger.debug("[Drag] Gesture cancelled")
        self.state = DragState()

    def reset(self):
        """Reset all state"""
        self.state = DragState()
        self.total_gestures = 0
        self.cancelled_gestures = 0

    def get_status(self) -> dict:
        return {
            'dragging': self.state.active,
            'anchor': (self.state.anchor.x, self.state.anchor.y),
            'preview': (self.state.preview.dx, self.state.preview.dy),
            'total_gestures': self.total_gestures,
            'cancelled_gestures': self.cancelled_gestures,
        }
