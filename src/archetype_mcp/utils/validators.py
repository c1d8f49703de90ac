"""Input coercion helpers shared by the classifier and the data layer."""

import math
from typing import Any


def normalize_symbol(symbol: str | None) -> str:
    """Uppercase and strip a ticker symbol. None becomes an empty string."""
    if symbol is None:
        return ""
    return str(symbol).upper().strip()


def optional_text(value: Any) -> str | None:
    """Stringify a text field. None stays None."""
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def safe_float(value: Any) -> float | None:
    """
    Convert to float or return None.

    None, NaN, infinities, booleans and non-numeric strings all map to None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (ValueError, TypeError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def metric_or_default(value: float | None, default: float = 0.0) -> float:
    """Return value, or default when the metric is unknown."""
    return default if value is None else value


def safe_scale(value: Any, factor: float) -> float | None:
    """Multiply a nullable numeric by factor (e.g. fraction -> percent)."""
    number = safe_float(value)
    if number is None:
        return None
    return number * factor
