"""Data layer for fetching and caching company fundamentals."""

from archetype_mcp.data.cache import FundamentalsCache
from archetype_mcp.data.yfinance_client import (
    INFO_ARCHETYPE_SENTINELS,
    InfoCompleteness,
    RetryResult,
    ServerShuttingDownError,
    YFinanceIncompleteInfoError,
    YFinanceRetryError,
    assess_info_completeness,
    fetch_fundamentals,
    fetch_info,
    fetch_info_with_provenance,
    normalize_fundamentals,
    shutdown_executor,
)

__all__ = [
    # Cache
    "FundamentalsCache",
    # yfinance
    "INFO_ARCHETYPE_SENTINELS",
    "InfoCompleteness",
    "RetryResult",
    "ServerShuttingDownError",
    "YFinanceIncompleteInfoError",
    "YFinanceRetryError",
    "assess_info_completeness",
    "fetch_fundamentals",
    "fetch_info",
    "fetch_info_with_provenance",
    "normalize_fundamentals",
    "shutdown_executor",
]
