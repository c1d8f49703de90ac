"""Tests for text sanitization."""

from archetype_mcp.utils.sanitize import sanitize_text


class TestSanitizeText:
    """Tests for sanitize_text function."""

    def test_sanitize_none(self) -> None:
        """None stays None."""
        assert sanitize_text(None) is None

    def test_sanitize_basic(self) -> None:
        assert sanitize_text("Technology") == "Technology"

    def test_sanitize_strips_whitespace(self) -> None:
        assert sanitize_text("  Software - Application  ") == "Software - Application"

    def test_sanitize_removes_control_chars(self) -> None:
        assert sanitize_text("Apple\x00Inc\x1f.") == "AppleInc."

    def test_sanitize_removes_newlines(self) -> None:
        """Newlines fall in the control range and are removed."""
        assert sanitize_text("Designs\nphones") == "Designsphones"

    def test_sanitize_removes_high_control_chars(self) -> None:
        assert sanitize_text("Hello\x7fWorld\x9f!") == "HelloWorld!"

    def test_sanitize_truncates_long_text(self) -> None:
        result = sanitize_text("A" * 600, max_length=500)

        assert len(result) == 503  # 500 + "..."
        assert result.endswith("...")

    def test_sanitize_exact_max_length(self) -> None:
        assert sanitize_text("Hello", max_length=5) == "Hello"

    def test_sanitize_non_string(self) -> None:
        """Numbers from upstream are stringified."""
        assert sanitize_text(12345) == "12345"

    def test_sanitize_preserves_unicode(self) -> None:
        assert sanitize_text("Nestlé S.A. 世界") == "Nestlé S.A. 世界"

    def test_sanitize_whitespace_only(self) -> None:
        assert sanitize_text("   ") == ""
