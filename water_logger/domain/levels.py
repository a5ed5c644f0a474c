from __future__ import annotations
import math

from .models import Level
from ..core.exceptions import InvalidLevelError


def parse_level(value: object) -> Level:
    """Accept ints and finite floats. Booleans, strings and None are rejected; 0 is valid."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidLevelError("Invalid level value")
    try:
        as_float = float(value)
    except OverflowError:
        raise InvalidLevelError("Invalid level value")
    if not math.isfinite(as_float):
        raise InvalidLevelError("Invalid level value")
    return value
