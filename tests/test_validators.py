"""Tests for input coercion helpers."""

from decimal import Decimal

from archetype_mcp.utils.validators import (
    metric_or_default,
    normalize_symbol,
    optional_text,
    safe_float,
    safe_scale,
)


class TestNormalizeSymbol:
    """Tests for normalize_symbol."""

    def test_uppercase(self) -> None:
        assert normalize_symbol("aapl") == "AAPL"

    def test_strips_whitespace(self) -> None:
        assert normalize_symbol("  nvda  ") == "NVDA"

    def test_none(self) -> None:
        assert normalize_symbol(None) == ""


class TestSafeFloat:
    """Tests for safe_float."""

    def test_numbers(self) -> None:
        assert safe_float(3) == 3.0
        assert safe_float("2.5") == 2.5
        assert safe_float(Decimal("1.25")) == 1.25

    def test_missing_values(self) -> None:
        """None, NaN and infinities map to None."""
        assert safe_float(None) is None
        assert safe_float(float("nan")) is None
        assert safe_float(float("inf")) is None

    def test_junk(self) -> None:
        assert safe_float("n/a") is None
        assert safe_float({}) is None

    def test_bool_rejected(self) -> None:
        """Booleans are not metrics."""
        assert safe_float(True) is None


class TestMetricOrDefault:
    """Tests for metric_or_default."""

    def test_value_passthrough(self) -> None:
        assert metric_or_default(-12.0) == -12.0

    def test_zero_kept(self) -> None:
        assert metric_or_default(0.0, default=5.0) == 0.0

    def test_none_default(self) -> None:
        assert metric_or_default(None) == 0.0
        assert metric_or_default(None, default=1.0) == 1.0


class TestSafeScale:
    """Tests for safe_scale."""

    def test_fraction_to_percent(self) -> None:
        assert safe_scale(0.125, 100) == 12.5

    def test_none(self) -> None:
        assert safe_scale(None, 100) is None
        assert safe_scale(float("nan"), 100) is None


class TestOptionalText:
    """Tests for optional_text."""

    def test_none(self) -> None:
        assert optional_text(None) is None

    def test_string_passthrough(self) -> None:
        assert optional_text("Technology") == "Technology"

    def test_number_stringified(self) -> None:
        assert optional_text(5) == "5"
