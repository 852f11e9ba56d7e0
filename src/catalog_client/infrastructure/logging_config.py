"""Logging bootstrap for the application."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV_VAR = "CATALOG_LOG_LEVEL"


def configure_logging() -> None:
    """Configure root logger once, honouring an optional level override."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    level = logging.getLevelName(level_name) if level_name else logging.INFO
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
