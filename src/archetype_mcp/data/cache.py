"""Disk cache for normalized fundamentals."""

import logging
import os
from datetime import datetime
from typing import Any

import diskcache

from archetype_mcp.models import FundamentalsInput
from archetype_mcp.utils.validators import normalize_symbol

logger = logging.getLogger(__name__)


class FundamentalsCache:
    """
    Cache of normalized fundamentals keyed by symbol.

    Owned by the caller and passed to the tools that use it.
    """

    def __init__(self, cache_dir: str | None = None, ttl: int | None = None):
        if cache_dir is None:
            cache_dir = os.environ.get("CACHE_DIR", ".cache/fundamentals")
        self.cache: diskcache.Cache = diskcache.Cache(cache_dir)
        self._default_ttl = ttl if ttl is not None else int(os.environ.get("CACHE_TTL", "300"))

    @staticmethod
    def key_for(symbol: str) -> str:
        """Canonical cache key."""
        return f"fundamentals://{normalize_symbol(symbol)}"

    def store(
        self,
        fundamentals: FundamentalsInput,
        ttl: int | None = None,
    ) -> str:
        """
        Store a fundamentals snapshot, return its key.

        Args:
            fundamentals: Normalized snapshot to cache
            ttl: Cache TTL in seconds (default: CACHE_TTL)

        Returns:
            Cache key for the stored entry
        """
        key = self.key_for(fundamentals.symbol)
        entry: dict[str, Any] = {
            "fundamentals": fundamentals.to_dict(),
            "stored_at": datetime.utcnow().isoformat(),
        }
        expire = ttl if ttl is not None else self._default_ttl
        self.cache.set(key, entry, expire=expire)
        logger.debug(f"cached {key} (ttl={expire}s)")
        return key

    def get(self, symbol: str) -> FundamentalsInput | None:
        """Cached snapshot for symbol, or None if absent or expired."""
        entry = self.get_entry(symbol)
        if not entry:
            return None
        return FundamentalsInput.from_dict(entry["fundamentals"])

    def get_entry(self, symbol: str) -> dict[str, Any] | None:
        """Raw cache entry including stored_at."""
        return self.cache.get(self.key_for(symbol))

    def exists(self, symbol: str) -> bool:
        """Check if symbol is cached."""
        return self.key_for(symbol) in self.cache

    def clear(self) -> None:
        """Clear all cached data."""
        self.cache.clear()

    def close(self) -> None:
        self.cache.close()
