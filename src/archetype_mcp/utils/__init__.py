"""Utility modules."""

from archetype_mcp.utils.provenance import build_error_response, build_meta, build_provenance
from archetype_mcp.utils.sanitize import sanitize_text
from archetype_mcp.utils.validators import (
    metric_or_default,
    normalize_symbol,
    optional_text,
    safe_float,
    safe_scale,
)

__all__ = [
    "build_error_response",
    "build_meta",
    "build_provenance",
    "sanitize_text",
    "metric_or_default",
    "normalize_symbol",
    "optional_text",
    "safe_float",
    "safe_scale",
]
