"""
Viewport Controller
Owns the single mutable Viewport + drag state pair for one surface and
exposes the operations input handling and the frame loop call.
"""
import logging
from typing import Optional

from drag_controller import DragEngine, DragState
from viewport_manager import (
    ZOOM_FACTOR,
    Bounds,
    PointerPosition,
    SourceRect,
    Viewport,
    clamp_viewport,
    compose,
    zoom_viewport,
)

logger = logging.getLogger(__name__)


class ViewportStateError(RuntimeError):
    """Raised when the viewport is used before bounds are known."""


class ViewportController:
    """
    Orchestrates zoom, drag and composition for one surface.

    Every operation assumes single-threaded use: the host serializes input
    callbacks and frame ticks.
    """

    def __init__(self, zoom_factor: float = ZOOM_FACTOR):
        if zoom_factor <= 1.0:
            raise ValueError(f"zoom_factor must be greater than 1, got {zoom_factor}")
        self.zoom_factor = zoom_factor

        self._bounds: Optional[Bounds] = None
        self._viewport: Optional[Viewport] = None
        self._initial_viewport: Optional[Viewport] = None
        self.drag = DragEngine()

        # Latest pointer position reported by the input source
        self.pointer = PointerPosition()

        # === DEBUG/STATS ===
        self.frames_composed = 0
        self.zoom_steps = 0

    @classmethod
    def from_config(cls, config):
        """Build a controller from a ConfigManager's viewport section."""
        return cls(zoom_factor=config.viewport.zoom_factor)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def is_initialized(self) -> bool:
        return self._bounds is not None

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def viewport(self) -> Optional[Viewport]:
        return self._viewport

    @property
    def drag_state(self) -> DragState:
        return self.drag.state

    def _require_initialized(self, operation):
        if not self.is_initialized:
            raise ViewportStateError(f"{operation} called before initialize()")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self, bounds: Bounds):
        """Install bounds once the content size is known and show the widest view."""
        self._bounds = bounds
        self._initial_viewport = clamp_viewport(Viewport(0.0, 0.0, bounds.max_scale), bounds)
        self._viewport = self._initial_viewport
        self.drag.reset()

        logger.info("[Viewport] Initialized: surface %gx%g, content %gx%g, scale %g..%g, clamped=%s",
                    bounds.surface_width, bounds.surface_height,
                    bounds.content_width, bounds.content_height,
                    bounds.min_scale, bounds.max_scale, bounds.clamped)

    def reset_view(self):
        """Reset viewport to the initial view, dropping any gesture."""
        self._require_initialized("reset_view")
        self.drag.cancel()
        self._viewport = self._initial_viewport

    def attach(self, input_source):
        """Subscribe to an InputSource."""
        input_source.subscribe(self)

    # ------------------------------------------------------------------
    # Input callbacks
    # ------------------------------------------------------------------
    def on_pointer_move(self, x, y):
        self.pointer = PointerPosition(float(x), float(y))

    def on_wheel(self, anchor: PointerPosition, delta) -> Viewport:
        """Zoom one step around anchor and replace the viewport."""
        self._require_initialized("on_wheel")
        if delta == 0:
            return self._viewport

        self._viewport = zoom_viewport(self._viewport, self._bounds, anchor, delta, self.zoom_factor)
        self.zoom_steps += 1
        logger.debug("[Viewport] Zoom at (%.1f, %.1f) -> x=%.2f y=%.2f scale=%.4f",
                     anchor.x, anchor.y, self._viewport.x, self._viewport.y, self._viewport.scale)
        return self._viewport

    def zoom_in(self, anchor: Optional[PointerPosition] = None) -> Viewport:
        """Zoom in by one step, around the surface centre by default."""
        return self.on_wheel(anchor or self._surface_centre(), -1)

    def zoom_out(self, anchor: Optional[PointerPosition] = None) -> Viewport:
        """Zoom out by one step, around the surface centre by default."""
        return self.on_wheel(anchor or self._surface_centre(), 1)

    def _surface_centre(self) -> PointerPosition:
        self._require_initialized("zoom")
        return PointerPosition(self._bounds.surface_width / 2.0, self._bounds.surface_height / 2.0)

    def on_gesture_start(self, pointer: Optional[PointerPosition] = None):
        self._require_initialized("on_gesture_start")
        if pointer is not None:
            self.pointer = pointer
        self.drag.start(self.pointer)

    def on_gesture_end(self):
        """Commit the drag; without an active gesture this does nothing."""
        if not self.drag.is_dragging:
            return
        self._viewport = self.drag.end(self._viewport, self._bounds)

    def on_gesture_cancel(self):
        self.drag.cancel()

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------
    def tick(self, pointer: Optional[PointerPosition] = None) -> SourceRect:
        """Advance the drag preview and return this frame's source rectangle."""
        self._require_initialized("tick")
        if pointer is not None:
            self.pointer = pointer

        preview = self.drag.update(self.pointer, self._viewport, self._bounds)
        self.frames_composed += 1
        return compose(self._viewport, preview, self._bounds)

    def get_status(self) -> dict:
        """Get controller status for debugging"""
        viewport = self._viewport
        return {
            'initialized': self.is_initialized,
            'viewport': (viewport.x, viewport.y, viewport.scale) if viewport else None,
            'zoom_percent': int(round(100.0 / viewport.scale)) if viewport else None,
            'pointer': (self.pointer.x, self.pointer.y),
            'frames_composed': self.frames_composed,
            'zoom_steps': self.zoom_steps,
            'drag': self.drag.get_status(),
        }
