"""Open external pages in the system browser."""

from __future__ import annotations

import logging

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices

LOGGER = logging.getLogger(__name__)


def open_in_browser(url: str) -> bool:
    """Ask the desktop to open url in a new browser context."""
    opened = QDesktopServices.openUrl(QUrl(url))
    if not opened:
        LOGGER.warning("event=browser_open_failed url=%s", url)
    return opened
