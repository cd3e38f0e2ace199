"""Preview window that plays a resolved animation."""

from __future__ import annotations

import logging
import time
from typing import Optional

from PySide6.QtCore import QTimer, Qt, Slot
from PySide6.QtGui import QAction, QImage, QPixmap
from PySide6.QtWidgets import QLabel, QMainWindow, QMessageBox, QStatusBar

from ..core import PlaybackSettings, ResolvedFrame
from ..core import gif_loader
from ..core.errors import AnimationLoadError
from ..core.player import AnimationPlayer
from ..core.resources import ResourceRegistry
from .file_picker import open_animation_file_dialog

logger = logging.getLogger(__name__)


class PixmapTexture:
    """Label-backed texture: the current buffer is uploaded as a QPixmap."""

    def __init__(self, label: QLabel):
        self.label = label
        self.pixmap: Optional[QPixmap] = None
        self.uploads = 0

    def update(self, frame: ResolvedFrame) -> None:
        image = QImage(
            frame.to_bytes(),
            frame.width,
            frame.height,
            frame.width * 4,
            QImage.Format_RGBA8888,
        ).copy()
        self.pixmap = QPixmap.fromImage(image)
        self.label.setPixmap(self.pixmap)
        self.uploads += 1

    def unload(self) -> None:
        if self.pixmap is None:
            return
        self.label.clear()
        self.pixmap = None
        logger.debug("Released preview pixmap after %s uploads", self.uploads)


class PreviewWindow(QMainWindow):
    """Drives ``AnimationPlayer.advance`` from a QTimer."""

    def __init__(self, settings: PlaybackSettings, registry: ResourceRegistry) -> None:
        super().__init__()
        self.setWindowTitle("Animation Preview")
        self.setMinimumSize(320, 240)
        self.settings = settings
        self.registry = registry
        self.player: Optional[AnimationPlayer] = None
        self._texture: Optional[PixmapTexture] = None

        self.status_bar = QStatusBar(self)
        self.setStatusBar(self.status_bar)
        self.canvas = QLabel("No animation loaded", self)
        self.canvas.setAlignment(Qt.AlignCenter)
        self.setCentralWidget(self.canvas)

        self._timer = QTimer(self)
        self._timer.setInterval(settings.tick_interval_ms)
        self._timer.timeout.connect(self._tick)
        self._last_tick = time.perf_counter()

        self._build_menu()

    def _build_menu(self) -> None:
        file_menu = self.menuBar().addMenu("File")
        open_action = QAction("Open", self)
        open_action.triggered.connect(self._on_open)
        reset_action = QAction("Restart", self)
        reset_action.triggered.connect(self._on_reset)
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(open_action)
        file_menu.addAction(reset_action)
        file_menu.addSeparator()
        file_menu.addAction(exit_action)

    def load(self, path) -> bool:
        """Replace the current animation; returns False when loading failed."""

        try:
            player = gif_loader.load_animation(path, registry=self.registry)
        except AnimationLoadError as exc:
            logger.error("Failed to load %s: %s", path, exc)
            QMessageBox.critical(self, "Load failed", str(exc))
            return False

        if self.player is not None:
            self.registry.unload(self.player)
        self.player = player
        self._texture = PixmapTexture(self.canvas)
        player.bind_texture(self._texture)
        self.status_bar.showMessage(
            f"{path} - {player.width}x{player.height}, {player.frame_count} frames"
        )
        self._last_tick = time.perf_counter()
        self._timer.start()
        return True

    @Slot()
    def _tick(self) -> None:
        now = time.perf_counter()
        delta = max(0.0, now - self._last_tick) * self.settings.speed
        self._last_tick = now
        if self.player is not None:
            self.player.advance(delta)

    @Slot()
    def _on_open(self) -> None:  # pragma: no cover - UI callback
        chosen = open_animation_file_dialog(self)
        if chosen:
            self.load(chosen)

    @Slot()
    def _on_reset(self) -> None:
        if self.player is not None:
            self.player.reset()
            if self._texture is not None:
                self._texture.update(self.player.current_buffer())
            self._last_tick = time.perf_counter()

    def closeEvent(self, event) -> None:  # pragma: no cover - UI callback
        self._timer.stop()
        self.registry.unload_all()
        super().closeEvent(event)
