#!/usr/bin/env python3
"""
Canvas Zoom Viewer
Main Entry Point
"""
import sys
import os
import logging
import traceback

from PyQt6.QtWidgets import QApplication


def main():
    logging.basicConfig(
        level=os.environ.get('VIEWER_LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    app = QApplication(sys.argv)
    app.setStyle('Fusion')
    app.setApplicationName("Canvas Zoom Viewer")
    app.setApplicationDisplayName("Canvas Zoom Viewer")

    # Ensure directories exist
    os.makedirs('config', exist_ok=True)

    image_path = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        from main_window import MainWindow
        window = MainWindow(image_path=image_path)
        window.show()

        return app.exec()
    except Exception as e:
        logging.getLogger(__name__).error("Error starting application: %s\n%s", e, traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
