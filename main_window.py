"""
Main Window - Canvas Zoom Viewer
Qt host for the viewport core: the canvas widget is the input source and
renderer, a QTimer drives the frame tick.
"""
import os
import logging
import traceback

import cv2
import numpy as np

from PyQt6.QtWidgets import *
from PyQt6.QtCore import *
from PyQt6.QtGui import *

from config_manager import ConfigManager
from frame_scheduler import FrameScheduler
from input_source import InputSource
from utils import ImageAsset
from viewport_controller import ViewportController, ViewportStateError
from viewport_manager import get_transform_matrix

logger = logging.getLogger(__name__)


def cv2_to_qpixmap(frame_bgr):
    """Convert BGR OpenCV image to QPixmap for display."""
    frame_rgb = np.ascontiguousarray(cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB))
    h, w, ch = frame_rgb.shape
    bytes_per_line = ch * w

    # QPixmap.fromImage copies, so the array can be dropped afterwards
    q_image = QImage(frame_rgb.data, w, h, bytes_per_line, QImage.Format.Format_RGB888)
    return QPixmap.fromImage(q_image)


# ============================================================================
# SCHEDULER
# ============================================================================

class QtFrameScheduler(FrameScheduler):
    """Frame scheduler backed by a QTimer on the GUI thread"""

    def __init__(self, fps=60, parent=None):
        super().__init__(fps)
        self.timer = QTimer(parent)
        self.timer.setTimerType(Qt.TimerType.PreciseTimer)
        self.timer.timeout.connect(self.fire)

    def start(self, callback):
        super().start(callback)
        self.timer.start(int(round(self.interval_ms)))

    def stop(self):
        self.timer.stop()
        super().stop()


# ============================================================================
# CANVAS WIDGET
# ============================================================================

class CanvasWidget(QWidget):
    """Fixed-size surface: forwards mouse input and blits the source rectangle"""

    def __init__(self, width=800, height=600, parent=None):
        super().__init__(parent)
        self.input = InputSource()
        self.pixmap = None
        self.source_rect = None

        self.setFixedSize(width, height)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    def set_pixmap(self, pixmap):
        self.pixmap = pixmap
        self.source_rect = None
        self.update()

    def render_frame(self, source_rect):
        """Renderer hook: remember this frame's source rectangle and repaint."""
        self.source_rect = source_rect
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(32, 32, 32))

        if self.pixmap is not None and self.source_rect is not None:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
            target = QRectF(0, 0, self.width(), self.height())
            source = QRectF(*self.source_rect.as_tuple())
            painter.drawPixmap(target, self.pixmap, source)

        painter.end()

    def mousePressEvent(self, event):
        try:
            if event.button() == Qt.MouseButton.LeftButton:
                pos = event.position()
                self.input.emit_pointer_down(pos.x(), pos.y())
                self.setCursor(Qt.CursorShape.ClosedHandCursor)
        except ViewportStateError as e:
            logger.debug("[Canvas] Press ignored: %s", e)

    def mouseMoveEvent(self, event):
        pos = event.position()
        self.input.emit_pointer_move(pos.x(), pos.y())

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.input.emit_pointer_up()
            self.setCursor(Qt.CursorShape.OpenHandCursor)

    def leaveEvent(self, event):
        self.input.emit_pointer_leave()
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        super().leaveEvent(event)

    def wheelEvent(self, event):
        try:
            # Qt reports positive deltas when the wheel turns away from the user;
            # that should zoom in, i.e. shrink the scale
            delta = -event.angleDelta().y()
            pos = event.position()
            self.input.emit_wheel(delta, pos.x(), pos.y())
            event.accept()
        except ViewportStateError as e:
            logger.debug("[Canvas] Wheel ignored: %s", e)


# ============================================================================
# MAIN WINDOW CLASS
# ============================================================================

class MainWindow(QMainWindow):
    """Viewer window: one canvas, one controller, one image"""

    def __init__(self, image_path=None, config_file='config/config.json'):
        super().__init__()

        self.config = ConfigManager(config_file)
        if not self.config.validate_config():
            logger.warning("[Viewer] Invalid configuration, falling back to defaults")
            self.config._create_default_config()

        self.asset = ImageAsset()
        self.controller = ViewportController.from_config(self.config)
        self.scheduler = QtFrameScheduler(self.config.viewport.fps, self)

        self.init_ui()
        self.controller.attach(self.canvas_widget.input)

        path = image_path or self.config.ui.last_image
        if path:
            self.load_image(path)

    def init_ui(self):
        """Initialize user interface"""
        self.setWindowTitle("Canvas Zoom Viewer")

        self.canvas_widget = CanvasWidget(self.config.ui.surface_width,
                                          self.config.ui.surface_height)
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(5, 5, 5, 5)
        layout.addWidget(self.canvas_widget, 0, Qt.AlignmentFlag.AlignCenter)
        self.setCentralWidget(container)

        self.create_menu()
        self.create_status_bar()
        self.apply_styles()

    def create_menu(self):
        """Create menu bar"""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")

        open_action = QAction("&Open...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.open_image)
        file_menu.addAction(open_action)

        exit_action = QAction("E&xit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        view_menu = menubar.addMenu("&View")

        zoom_in_action = QAction("Zoom &In", self)
        zoom_in_action.setShortcut("Ctrl++")
        zoom_in_action.triggered.connect(self.zoom_in)
        view_menu.addAction(zoom_in_action)

        zoom_out_action = QAction("Zoom &Out", self)
        zoom_out_action.setShortcut("Ctrl+-")
        zoom_out_action.triggered.connect(self.zoom_out)
        view_menu.addAction(zoom_out_action)

        reset_view_action = QAction("&Reset View", self)
        reset_view_action.setShortcut("Ctrl+0")
        reset_view_action.triggered.connect(self.reset_view)
        view_menu.addAction(reset_view_action)

    def create_status_bar(self):
        """Create status bar"""
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self.zoom_label = QLabel("Zoom: --")
        self.status_bar.addWidget(self.zoom_label)

        self.coord_label = QLabel("X: --, Y: --")
        self.status_bar.addWidget(self.coord_label)

        self.status_bar.setVisible(self.config.ui.show_status)
        self.status_bar.showMessage("Open an image to begin", 5000)

    def apply_styles(self):
        """Apply styles"""
        if self.config.ui.theme != 'dark':
            return
        self.setStyleSheet("""
            QMainWindow {
                background-color: #1a1a2e;
            }

            QLabel {
                color: white;
            }

            QStatusBar {
                background-color: #16213e;
                color: white;
            }

            QMenuBar {
                background-color: #16213e;
                color: white;
            }

            QMenuBar::item:selected {
                background-color: #0f3460;
            }
        """)

    # ============================================================================
    # FRAME LOOP
    # ============================================================================

    def on_frame(self):
        """One scheduler tick: advance the controller and hand the rectangle to the canvas"""
        rect = self.controller.tick()
        self.canvas_widget.render_frame(rect)
        self.update_status()
        return rect

    def update_status(self):
        """Show zoom level and the content pixel under the pointer"""
        status = self.controller.get_status()
        self.zoom_label.setText(f"Zoom: {status['zoom_percent']}%")

        x, y = status['pointer']
        content = get_transform_matrix(self.controller.viewport) @ np.array([x, y, 1.0])
        self.coord_label.setText(f"X: {int(content[0])}, Y: {int(content[1])}")

    # ============================================================================
    # FILE OPERATIONS
    # ============================================================================

    def show_warning(self, title, message):
        QMessageBox.warning(self, title, message)

    def open_image(self):
        """Open image file"""
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open Image", "",
            "Image Files (*.png *.jpg *.jpeg *.bmp *.tif *.tiff);;All Files (*)"
        )
        if file_path:
            self.load_image(file_path)

    def load_image(self, file_path):
        """Load the backing image and (re)initialize the viewport for it.

        The current image keeps showing unless the new one is fully prepared.
        """
        asset = ImageAsset()
        if not asset.load(file_path):
            self.show_warning("Error", f"Could not read image file:\n{file_path}")
            return False

        try:
            pixmap = cv2_to_qpixmap(asset.image)
            bounds = asset.bounds_for_surface(
                self.config.ui.surface_width,
                self.config.ui.surface_height,
                min_scale=self.config.viewport.min_scale,
                clamped=self.config.viewport.clamped,
            )
        except Exception as e:
            logger.error("[Viewer] Error preparing image: %s\n%s", e, traceback.format_exc())
            self.show_warning("Error", f"Error loading image: {str(e)}")
            return False

        self.scheduler.stop()
        self.asset = asset
        self.canvas_widget.set_pixmap(pixmap)
        self.controller.initialize(bounds)
        self.scheduler.start(self.on_frame)
        self.config.update_ui_config(last_image=os.path.abspath(file_path))
        self.status_bar.showMessage(f"Loaded: {os.path.basename(file_path)}", 3000)
        return True

    # ============================================================================
    # VIEW ACTIONS
    # ============================================================================

    def zoom_in(self):
        """Zoom in"""
        if self.controller.is_initialized:
            self.controller.zoom_in()

    def zoom_out(self):
        """Zoom out"""
        if self.controller.is_initialized:
            self.controller.zoom_out()

    def reset_view(self):
        """Reset view"""
        if self.controller.is_initialized:
            self.controller.reset_view()

    def closeEvent(self, event):
        """Handle window close event"""
        self.scheduler.stop()
        self.config.save_config()
        event.accept()
