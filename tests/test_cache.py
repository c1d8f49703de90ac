"""Tests for the fundamentals disk cache."""

import pytest

from archetype_mcp.data.cache import FundamentalsCache
from archetype_mcp.models import FundamentalsInput


@pytest.fixture
def cache(tmp_path) -> FundamentalsCache:
    c = FundamentalsCache(cache_dir=str(tmp_path / "fundamentals"), ttl=60)
    yield c
    c.close()


class TestFundamentalsCache:
    """Tests for FundamentalsCache."""

    def test_key_canonical(self) -> None:
        """Keys are uppercase and prefixed."""
        assert FundamentalsCache.key_for(" crm ") == "fundamentals://CRM"

    def test_miss(self, cache) -> None:
        assert cache.get("CRM") is None
        assert cache.exists("CRM") is False

    def test_store_and_get(self, cache, saas_platform_dict) -> None:
        """Stored snapshot comes back equal."""
        f = FundamentalsInput.from_dict(saas_platform_dict)

        key = cache.store(f)

        assert key == "fundamentals://CRM"
        assert cache.exists("crm") is True
        assert cache.get("crm") == f

    def test_entry_has_timestamp(self, cache, bare_fundamentals) -> None:
        cache.store(bare_fundamentals)
        entry = cache.get_entry("XYZ")
        assert "stored_at" in entry

    def test_clear(self, cache, bare_fundamentals) -> None:
        cache.store(bare_fundamentals)
        cache.clear()
        assert cache.get("XYZ") is None
