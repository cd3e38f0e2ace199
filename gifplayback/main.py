"""Entry point for the animation preview application."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from .core import PlaybackSettings
from .core.resources import ResourceRegistry
from .utils import validators

LOG_LEVEL_ENV = "GIFPLAYBACK_LOG_LEVEL"


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=validators.parse_log_level(level or os.environ.get(LOG_LEVEL_ENV)),
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def run(settings: PlaybackSettings) -> int:
    """Open a preview window for ``settings.source_path`` and start the Qt event loop."""

    from PySide6.QtWidgets import QApplication

    from .gui.preview_window import PreviewWindow

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("gifplayback")

    with ResourceRegistry() as registry:
        window = PreviewWindow(settings, registry)
        if not window.load(settings.source_path):
            return 2
        window.show()
        return app.exec()
