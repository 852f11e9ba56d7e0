"""Runtime configuration for the catalog service connection."""

from __future__ import annotations

import os
from dataclasses import dataclass

BACKEND_URL_ENV_VAR = "CATALOG_BACKEND_URL"
DEFAULT_BACKEND_URL = "http://localhost:8000"


@dataclass(frozen=True)
class CatalogClientConfig:
    """Resolved connection settings."""

    base_url: str = DEFAULT_BACKEND_URL


def default_client_config() -> CatalogClientConfig:
    """Build config from environment, falling back to the local backend."""
    return CatalogClientConfig(
        base_url=_resolve_base_url(env_var=BACKEND_URL_ENV_VAR, fallback=DEFAULT_BACKEND_URL)
    )


def _resolve_base_url(*, env_var: str, fallback: str) -> str:
    raw_value = os.environ.get(env_var, "")
    resolved = raw_value.strip().rstrip("/")
    return resolved if resolved else fallback
