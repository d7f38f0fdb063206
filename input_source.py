"""
Input Source
Dumb input layer: hosts translate native pointer/wheel events into surface
coordinates and push them here. Listeners (normally a ViewportController)
receive them in order. No math here.
"""
import logging

from viewport_manager import PointerPosition

logger = logging.getLogger(__name__)


class InputSource:
    """Fans out pointer and wheel events to subscribed listeners."""

    def __init__(self):
        self._listeners = []
        self.pointer = PointerPosition()
        self.pointer_down = False

    def subscribe(self, listener):
        """
        Register a listener.

        Listeners provide on_pointer_move(x, y), on_gesture_start(pointer),
        on_gesture_end() and on_wheel(anchor, delta).
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listeners(self):
        return list(self._listeners)

    def emit_pointer_move(self, x, y):
        self.pointer = PointerPosition(float(x), float(y))
        for listener in self._listeners:
            listener.on_pointer_move(self.pointer.x, self.pointer.y)

    def emit_pointer_down(self, x=None, y=None):
        if x is not None and y is not None:
            self.pointer = PointerPosition(float(x), float(y))
        self.pointer_down = True
        for listener in self._listeners:
            listener.on_gesture_start(self.pointer)

    def emit_pointer_up(self):
        self.pointer_down = False
        for listener in self._listeners:
            listener.on_gesture_end()

    def emit_pointer_leave(self):
        """Pointer left the surface; an in-progress drag ends like a release."""
        if self.pointer_down:
            logger.debug("[Input] Pointer left surface during drag")
        self.emit_pointer_up()

    def emit_wheel(self, delta, x=None, y=None):
        """Deliver a wheel step anchored at (x, y), or the last known pointer."""
        if x is not None and y is not None:
            self.pointer = PointerPosition(float(x), float(y))
        for listener in self._listeners:
            listener.on_wheel(self.pointer, delta)
