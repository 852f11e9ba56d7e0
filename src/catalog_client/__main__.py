"""Application entrypoint."""

from __future__ import annotations

import logging
import sys
from uuid import uuid4

from catalog_client.infrastructure.logging_config import configure_logging
from catalog_client.presentation.qt.app import run

LOGGER = logging.getLogger(__name__)


def main() -> int:
    """Run the desktop catalog client."""
    configure_logging()
    try:
        return run(sys.argv)
    except Exception:
        correlation_id = str(uuid4())
        LOGGER.exception("event=app_start_failed correlation_id=%s", correlation_id)
        print(f"Failed to start the catalog client. correlation_id={correlation_id}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
