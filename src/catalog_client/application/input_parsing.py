"""Parsing helpers for free-text form fields."""

from __future__ import annotations

import math
import re

_LEADING_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def split_comma_list(raw_text: str) -> list[str]:
    """Split on commas, trim each segment and drop empty ones, keeping order."""
    return [segment.strip() for segment in raw_text.split(",") if segment.strip()]


def parse_price(raw_text: str) -> float:
    """Parse the leading decimal number of price text.

    Trailing garbage is ignored ("12.5 USD" -> 12.5). Empty or non-numeric input
    yields 0.
    """
    match = _LEADING_NUMBER_PATTERN.match(raw_text.strip())
    if match is None:
        return 0.0
    value = float(match.group(0))
    if not math.isfinite(value):
        return 0.0
    return value
