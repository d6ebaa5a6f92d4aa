"""Numeric coercion and rounding rules shared by the models and engines.

Every value crossing into the engine goes through ``coerce_number`` so that
missing or unparsable input (None, "", NaN, inf) behaves as 0 instead of
propagating. Percentage-derived dollar amounts are rounded with
``round_dollars`` (half away from zero).
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Convert a raw input value to a finite float.

    Strings are parsed after stripping ``$`` and ``,`` separators.

    Args:
        value: Raw value (number, numeric string, None, ...).
        default: Value returned when the input is missing or not finite.

    Returns:
        A finite float.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        cleaned = value.replace("$", "").replace(",", "").strip()
        if not cleaned:
            return default
        try:
            value = float(cleaned)
        except ValueError:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def coerce_non_negative(value: Any) -> float:
    """Coerce a value and clamp negatives to 0 (percentages, rates)."""
    return max(0.0, coerce_number(value))


def coerce_int(value: Any, default: int = 0) -> int:
    """Coerce a value to an int, truncating any fraction."""
    return int(coerce_number(value, float(default)))


def round_dollars(value: float) -> float:
    """Round to the nearest dollar, halves away from zero.

    Rounds the shortest decimal form of the float, so 0.49999999999999994
    stays 0 and 2.5 becomes 3. Non-finite input rounds to 0.
    """
    number = coerce_number(value)
    return float(Decimal(repr(number)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is zero or the result is not finite."""
    if denominator == 0:
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0
