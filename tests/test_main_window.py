import os

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

import cv2
import pytest
from PyQt6.QtCore import QPoint, QPointF, Qt
from PyQt6.QtGui import QWheelEvent
from PyQt6.QtWidgets import QApplication

from main_window import CanvasWidget, MainWindow, cv2_to_qpixmap
from utils import create_blank_image
from viewport_controller import ViewportController
from viewport_manager import Bounds, SourceRect


@pytest.fixture(scope='module')
def qapp():
    return QApplication.instance() or QApplication([])


@pytest.fixture
def image_file(tmp_path):
    path = str(tmp_path / 'nebula.png')
    cv2.imwrite(path, create_blank_image(1600, 1200, color=(40, 80, 120)))
    return path


@pytest.fixture
def window(qapp, tmp_path, image_file):
    window = MainWindow(image_path=image_file, config_file=str(tmp_path / 'config.json'))
    window.warnings = []
    window.show_warning = lambda title, message: window.warnings.append(message)
    yield window
    window.scheduler.stop()


def wheel_event(x, y, angle):
    return QWheelEvent(QPointF(x, y), QPointF(x, y), QPoint(0, 0), QPoint(0, angle),
                       Qt.MouseButton.NoButton, Qt.KeyboardModifier.NoModifier,
                       Qt.ScrollPhase.NoScrollPhase, False)


def test_wheel_away_from_user_zooms_in(qapp):
    canvas = CanvasWidget(100, 100)
    controller = ViewportController()
    controller.initialize(Bounds(100, 100, 1000, 1000, 1.0, 10.0))
    controller.attach(canvas.input)

    canvas.wheelEvent(wheel_event(50, 50, 120))
    assert controller.viewport.scale == pytest.approx(10 / 1.1)

    canvas.wheelEvent(wheel_event(50, 50, -120))
    assert controller.viewport.scale == pytest.approx(10)


def test_canvas_samples_the_source_rect(qapp):
    # Left half red, right half blue (BGR)
    image = create_blank_image(100, 50, color=(0, 0, 255))
    image[:, 50:] = (255, 0, 0)

    canvas = CanvasWidget(50, 50)
    canvas.set_pixmap(cv2_to_qpixmap(image))

    canvas.render_frame(SourceRect(50, 0, 50, 50))
    color = canvas.grab().toImage().pixelColor(25, 25)
    assert (color.red(), color.green(), color.blue()) == (0, 0, 255)

    canvas.render_frame(SourceRect(0, 0, 50, 50))
    color = canvas.grab().toImage().pixelColor(25, 25)
    assert (color.red(), color.green(), color.blue()) == (255, 0, 0)


def test_load_starts_frame_loop(window):
    assert window.asset.is_loaded
    assert window.scheduler.is_running
    assert window.controller.bounds.content_width == 1600
    assert window.controller.viewport.scale == pytest.approx(2.0)


def test_unreadable_image_keeps_current_one(window, tmp_path):
    bad = tmp_path / 'bad.png'
    bad.write_bytes(b'not an image')
    bounds = window.controller.bounds

    assert not window.load_image(str(bad))

    assert window.warnings
    assert window.scheduler.is_running
    assert window.asset.is_loaded
    assert (window.asset.width, window.asset.height) == (1600, 1200)
    assert window.controller.bounds is bounds


def test_loading_another_image_reinitializes(window, tmp_path):
    path = str(tmp_path / 'small.png')
    cv2.imwrite(path, create_blank_image(1200, 900))

    assert window.load_image(path)

    assert window.scheduler.is_running
    assert window.asset.width == 1200
    assert window.controller.viewport.scale == pytest.approx(1.5)


def test_status_bar_shows_content_coordinates(window):
    window.controller.on_pointer_move(100, 50)

    window.on_frame()

    assert window.coord_label.text() == "X: 200, Y: 100"
    assert window.zoom_label.text() == "Zoom: 50%"
