"""Qt application bootstrap."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import uuid4

from PySide6.QtWidgets import QApplication

from catalog_client.infrastructure.config import default_client_config
from catalog_client.presentation.qt.main_window import MainWindow
from catalog_client.presentation.qt.theme import apply_theme

LOGGER = logging.getLogger(__name__)


def create_application(argv: Sequence[str] | None = None) -> QApplication:
    """Create or return the singleton QApplication instance."""
    existing_app = QApplication.instance()
    if isinstance(existing_app, QApplication):
        return existing_app

    resolved_argv = list(argv) if argv is not None else []
    application = QApplication(resolved_argv)
    application.setApplicationName("Catalog Client")
    application.setOrganizationName("AI Recommend E-Learning")
    return application


def run(argv: Sequence[str] | None = None) -> int:
    """Run Qt event loop with the main window."""
    correlation_id = str(uuid4())
    config = default_client_config()
    LOGGER.info(
        "event=app_start correlation_id=%s base_url=%s",
        correlation_id,
        config.base_url,
    )
    application = create_application(argv)
    apply_theme(application)
    window = MainWindow(config=config)
    window.show()
    exit_code = application.exec()
    LOGGER.info(
        "event=app_exit correlation_id=%s exit_code=%s",
        correlation_id,
        exit_code,
    )
    return exit_code
