"""Domain enumerations for the portfolio tracker.

All string-valued enums use str mixin so they serialize cleanly to JSON
and remain comparable to plain strings (Pydantic default behaviour).
"""

from enum import Enum


class PriceStatus(str, Enum):
    """Outcome tag for a single per-symbol price fetch."""

    KNOWN = "known"
    UNKNOWN = "unknown"
