"""
Image asset loading and helpers
"""
import logging
import os

import cv2
import numpy as np

from viewport_controller import ViewportStateError
from viewport_manager import Bounds

logger = logging.getLogger(__name__)


class ImageAsset:
    """Backing image for a surface; supplies the content size once loaded."""

    def __init__(self, path=None):
        self.path = path
        self.image = None

    @property
    def is_loaded(self) -> bool:
        return self.image is not None and self.image.size > 0

    @property
    def width(self) -> int:
        return int(self.image.shape[1]) if self.is_loaded else 0

    @property
    def height(self) -> int:
        return int(self.image.shape[0]) if self.is_loaded else 0

    def load(self, path=None) -> bool:
        """Read the image with OpenCV. Returns False when it can't be decoded."""
        if path is not None:
            self.path = path
        if not self.path or not os.path.exists(self.path):
            logger.error("[Asset] File not found: %s", self.path)
            self.image = None
            return False

        image = cv2.imread(self.path, cv2.IMREAD_COLOR)
        if image is None:
            logger.error("[Asset] Could not decode image: %s", self.path)
            self.image = None
            return False

        self.image = image
        logger.info("[Asset] Loaded %s (%dx%d)", self.path, self.width, self.height)
        return True

    def set_image(self, bgr_img):
        """Use an already decoded BGR array as the asset."""
        self.image = ensure_bgr(bgr_img)
        self.path = None

    def bounds_for_surface(self, surface_width, surface_height, min_scale=1.0, clamped=True) -> Bounds:
        """Build Bounds for a surface; only valid once the image is loaded."""
        if not self.is_loaded:
            raise ViewportStateError("image asset is not loaded yet")
        return Bounds.for_content(surface_width, surface_height, self.width, self.height,
                                  min_scale=min_scale, clamped=clamped)


def ensure_bgr(image):
    """Normalize grayscale and BGRA arrays to 3-channel BGR."""
    if image is None or image.size == 0:
        raise ValueError("empty image")
    if len(image.shape) == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    if image.shape[2] == 4:
        return np.ascontiguousarray(image[:, :, :3])
    return image


def create_blank_image(width, height, color=(255, 255, 255)):
    """Create a blank image with specified color."""
    blank = np.ones((height, width, 3), dtype=np.uint8)
    blank[:] = color
    return blank
