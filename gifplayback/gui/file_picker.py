"""Native file picker helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QFileDialog, QWidget

from ..utils.validators import ALLOWED_ANIMATION_EXTENSIONS


def open_animation_file_dialog(parent: QWidget) -> Optional[Path]:
    """Open a native file dialog and return the selected animation path."""

    patterns = " ".join(f"*{ext}" for ext in sorted(ALLOWED_ANIMATION_EXTENSIONS))
    dialog = QFileDialog(parent, caption="Select Animation")
    dialog.setFileMode(QFileDialog.ExistingFile)
    dialog.setNameFilters([
        f"Animations ({patterns})",
        "All Files (*.*)",
    ])
    if dialog.exec():
        selected = dialog.selectedFiles()
        if selected:
            return Path(selected[0])
    return None
