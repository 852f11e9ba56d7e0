"""Look and feel for the Qt presentation layer."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QApplication

LOGGER = logging.getLogger(__name__)
_DEFAULT_POINT_SIZE = 10
_ASSETS_DIR = Path(__file__).resolve().parents[2] / "assets"


def apply_theme(application: QApplication) -> None:
    """Apply base font and style sheet for the application."""
    font = QFont(application.font())
    font.setPointSize(_DEFAULT_POINT_SIZE)
    application.setFont(font)

    stylesheet_loaded = _apply_stylesheet(application)
    LOGGER.info(
        "event=ui_theme_applied font_family=%s stylesheet_loaded=%s",
        font.family(),
        stylesheet_loaded,
    )


def _apply_stylesheet(application: QApplication) -> bool:
    stylesheet_file = _ASSETS_DIR / "theme" / "app.qss"
    if not stylesheet_file.exists():
        LOGGER.warning("event=ui_stylesheet_missing path=%s", stylesheet_file)
        return False

    application.setStyleSheet(stylesheet_file.read_text(encoding="utf-8"))
    return True
