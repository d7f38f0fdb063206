"""
Frame schedulers - drive the per-frame tick at a fixed cadence.

The cadence belongs to the host. Tests use ManualScheduler to step frames
without real timers; the Qt host uses a QTimer-backed subclass.
"""
import logging

logger = logging.getLogger(__name__)


class FrameScheduler:
    """Base scheduler: remembers the frame callback and the cadence."""

    def __init__(self, fps=60):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.fps = fps
        self._callback = None
        self.running = False
        self.frame_count = 0

    @property
    def interval_ms(self) -> float:
        return 1000.0 / self.fps

    @property
    def is_running(self) -> bool:
        return self.running

    def start(self, callback):
        """Begin calling callback once per frame."""
        self._callback = callback
        self.running = True
        logger.info("[Scheduler] Started at %s fps", self.fps)

    def stop(self):
        if self.running:
            logger.info("[Scheduler] Stopped after %d frames", self.frame_count)
        self.running = False

    def fire(self):
        """Run one frame if started."""
        if not self.running or self._callback is None:
            return None
        self.frame_count += 1
        return self._callback()


class ManualScheduler(FrameScheduler):
    """Scheduler stepped explicitly by the caller."""

    def step(self, frames=1):
        """Fire frames and return the last callback result."""
        result = None
        for _ in range(frames):
            result = self.fire()
        return result
