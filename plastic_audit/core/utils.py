"""Core utility functions for the application"""

import math
import re
from datetime import date
from typing import Any, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_count(value: Any) -> int:
    """
    Parse a form count into a non-negative integer.

    Counts are entered as free text. The leading integer is used
    ("12 bottles" -> 12, "3.7" -> 3); empty, non-numeric and negative
    input all become 0 so a stray keystroke never blocks the user.

    Args:
        value: Raw form value (str, int, None, ...)

    Returns:
        int: The parsed count, never negative
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0) if math.isfinite(value) else 0

    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def is_blank(value: Optional[Any]) -> bool:
    """True for values a form treats as "not entered": None and empty string."""
    return value is None or value == ""


def today_iso(today: Optional[date] = None) -> str:
    """
    Format a date the way the audit date input expects it.

    Returns:
        str: ISO date (e.g., "2026-02-05")
    """
    return (today or date.today()).isoformat()
