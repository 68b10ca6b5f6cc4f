"""
Request parameter normalization.

Palette size and variance arrive as loosely typed user input (query strings,
form fields, JSON numbers). Anything absent or unparsable falls back to the
default; numbers are clamped into their domain. Nothing here raises.
"""

import math
from typing import Any

from palette_api.config import Config


def _parse_number(raw: Any) -> float:
    # Absent values take the default instead of clamping to the minimum
    if raw is None:
        return math.nan
    if isinstance(raw, str):
        raw = raw.strip()
        if raw == "":
            return math.nan
    try:
        return float(raw)
    except (TypeError, ValueError):
        return math.nan


def normalize_param(raw: Any, minimum: int, maximum: int, default: int) -> int:
    """
    Clamp a raw parameter into ``[minimum, maximum]``.

    Args:
        raw: User supplied value (str, int, float or None)
        minimum: Lower bound, applied first
        maximum: Upper bound, applied second
        default: Returned when ``raw`` is absent or not a number

    Returns:
        Clamped value truncated to int
    """
    number = _parse_number(raw)
    if math.isnan(number):
        return default

    number = max(minimum, number)
    number = min(maximum, number)
    return int(number)


def normalize_palette_size(raw: Any) -> int:
    """Normalize palette size into [1, 16], default 4."""
    return normalize_param(
        raw, Config.PALETTE_SIZE_MIN, Config.PALETTE_SIZE_MAX, Config.PALETTE_SIZE_DEFAULT
    )


def normalize_variance(raw: Any) -> int:
    """Normalize variance into [0, 10], default 5."""
    return normalize_param(
        raw, Config.VARIANCE_MIN, Config.VARIANCE_MAX, Config.VARIANCE_DEFAULT
    )
