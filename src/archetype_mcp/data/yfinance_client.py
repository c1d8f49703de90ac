"""Async yfinance client with bounded concurrency and retry logic."""

import asyncio
import logging
import math
import os
import random
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, TypeVar

import yfinance as yf
from requests.exceptions import HTTPError

from archetype_mcp.models import FundamentalsInput, Metrics
from archetype_mcp.utils.sanitize import sanitize_text
from archetype_mcp.utils.validators import normalize_symbol, safe_float, safe_scale

logger = logging.getLogger(__name__)

# Bounded concurrency for yfinance calls
_max_workers = int(os.environ.get("YF_MAX_WORKERS", "4"))
_executor = ThreadPoolExecutor(max_workers=_max_workers)
_fetch_semaphore = asyncio.Semaphore(_max_workers)

# Retry configuration
_max_retries = int(os.environ.get("YF_MAX_RETRIES", "3"))
_base_delay = float(os.environ.get("YF_BASE_DELAY", "1.0"))  # seconds
_max_delay = float(os.environ.get("YF_MAX_DELAY", "30.0"))  # seconds

# Shutdown coordination
shutdown_event = asyncio.Event()

T = TypeVar("T")


class ServerShuttingDownError(Exception):
    """Raised when server is shutting down."""

    pass


class YFinanceRetryError(Exception):
    """Raised when yfinance fails after all retries."""

    def __init__(self, message: str, last_error: Exception | None = None):
        super().__init__(message)
        self.last_error = last_error


class YFinanceIncompleteInfoError(RuntimeError):
    """Raised when yfinance returns an info payload without any ratio we classify on."""

    def __init__(self, symbol: str, *, key_count: int, sentinel_values_present: int):
        super().__init__(
            f"Incomplete yfinance info for {symbol}: "
            f"keys={key_count}, sentinel_values_present={sentinel_values_present}"
        )
        self.symbol = symbol
        self.key_count = key_count
        self.sentinel_values_present = sentinel_values_present


@dataclass(frozen=True)
class InfoCompleteness:
    """Result of info completeness assessment."""

    is_incomplete: bool
    key_count: int
    quote_type: str | None
    sentinel_values_present: int


# Ratios the classifier reads. A crumb-broken payload carries none of them.
INFO_ARCHETYPE_SENTINELS: tuple[str, ...] = (
    "revenueGrowth",
    "profitMargins",
    "operatingMargins",
    "returnOnEquity",
    "earningsGrowth",
    "trailingPE",
    "freeCashflow",
    "operatingCashflow",
)

# metrics key -> (yfinance key, scale). Fractions become percentages.
_METRIC_SOURCES: dict[str, tuple[str, float]] = {
    "revenueGrowth": ("revenueGrowth", 100.0),
    "profitMargin": ("profitMargins", 100.0),
    "operatingMargin": ("operatingMargins", 100.0),
    "roe": ("returnOnEquity", 100.0),
    "earningsGrowth": ("earningsGrowth", 100.0),
    "trailingPE": ("trailingPE", 1.0),
    "forwardPE": ("forwardPE", 1.0),
    "priceToBook": ("priceToBook", 1.0),
    "priceToSales": ("priceToSalesTrailing12Months", 1.0),
    "currentRatio": ("currentRatio", 1.0),
    "debtToEquity": ("debtToEquity", 1.0),
    "freeCashflow": ("freeCashflow", 1.0),
    "operatingCashflow": ("operatingCashflow", 1.0),
}


def _has_value(v: Any) -> bool:
    """True unless v is None, NaN or a blank string."""
    if v is None:
        return False
    if isinstance(v, float) and math.isnan(v):
        return False
    if isinstance(v, str) and v.strip() == "":
        return False
    return True


def assess_info_completeness(info: dict[str, Any] | None) -> InfoCompleteness:
    """
    Assess whether an info dict carries anything the classifier can use.

    Only EQUITY (or unknown) quote types are enforced; ETFs and indexes
    legitimately lack company ratios.
    """
    if not isinstance(info, dict) or not info:
        return InfoCompleteness(
            is_incomplete=True,
            key_count=0,
            quote_type=None,
            sentinel_values_present=0,
        )

    quote_type_raw = info.get("quoteType")
    quote_type = str(quote_type_raw).upper() if quote_type_raw is not None else None
    enforce = quote_type in (None, "", "EQUITY")

    present = sum(1 for k in INFO_ARCHETYPE_SENTINELS if _has_value(info.get(k)))

    return InfoCompleteness(
        is_incomplete=enforce and present == 0,
        key_count=len(info),
        quote_type=quote_type,
        sentinel_values_present=present,
    )


def normalize_fundamentals(symbol: str, info: dict[str, Any]) -> FundamentalsInput:
    """
    Map a yfinance info dict to the classifier's input shape.

    Margin, growth and ROE fractions are scaled to percentages; anything
    missing stays None.
    """
    metrics = {
        key: safe_scale(info.get(source), scale)
        for key, (source, scale) in _METRIC_SOURCES.items()
    }

    return FundamentalsInput(
        symbol=normalize_symbol(info.get("symbol") or symbol),
        name=sanitize_text(info.get("shortName") or info.get("longName"), max_length=200),
        sector=sanitize_text(info.get("sector"), max_length=100),
        industry=sanitize_text(info.get("industry"), max_length=100),
        description=sanitize_text(info.get("longBusinessSummary"), max_length=2000),
        market_cap=safe_float(info.get("marketCap")),
        metrics=Metrics.from_dict(metrics),
    )


def _is_retryable_error(error: Exception) -> tuple[bool, int]:
    """
    Check if an error is retryable (transient).

    Returns:
        Tuple of (is_retryable, max_retries_for_this_error)
    """
    if isinstance(error, YFinanceIncompleteInfoError):
        return (True, 2)

    if (
        isinstance(error, HTTPError)
        and hasattr(error, "response")
        and error.response is not None
    ):
        status_code = error.response.status_code
        if status_code == 401:
            # Invalid crumb rarely recovers after one retry
            return (True, 1)
        if status_code == 429 or 500 <= status_code < 600:
            return (True, _max_retries)

    error_str = str(error).lower()

    if "401" in error_str or "invalid crumb" in error_str:
        return (True, 2)

    retryable_patterns = [
        "rate limit",
        "too many requests",
        "connection",
        "timeout",
        "temporary",
    ]
    if any(pattern in error_str for pattern in retryable_patterns):
        return (True, _max_retries)

    return (False, 0)


def _calculate_backoff(attempt: int) -> float:
    """Calculate delay with exponential backoff and jitter."""
    delay = _base_delay * (2**attempt)
    # +/-25% jitter
    jitter = delay * 0.25 * (2 * random.random() - 1)
    return min(delay + jitter, _max_delay)


@dataclass
class RetryResult:
    """Result of a retry operation with provenance tracking."""

    result: Any
    attempts: int
    total_backoff_seconds: float
    source: str = "yfinance"
    incomplete_detected: bool = False

    def to_provenance(self) -> dict[str, Any]:
        """Convert to provenance fields for data_provenance."""
        return {
            "attempts": self.attempts,
            "total_backoff_seconds": self.total_backoff_seconds,
            "incomplete_detected": self.incomplete_detected,
        }


async def _retry_with_backoff(
    operation_name: str,
    sync_func: Callable[[], T],
    max_retries: int = _max_retries,
) -> RetryResult:
    """
    Execute a synchronous function in the executor with retry logic.

    Raises:
        YFinanceRetryError: If all retries exhausted
        ServerShuttingDownError: If server is shutting down
    """
    total_backoff = 0.0
    incomplete_detected = False

    for attempt in range(max_retries + 1):
        if shutdown_event.is_set():
            raise ServerShuttingDownError("Server is shutting down")

        try:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(_executor, sync_func)
            return RetryResult(
                result=result,
                attempts=attempt + 1,
                total_backoff_seconds=round(total_backoff, 2),
                incomplete_detected=incomplete_detected,
            )
        except Exception as e:
            if isinstance(e, YFinanceIncompleteInfoError):
                incomplete_detected = True

            is_retryable, error_max_retries = _is_retryable_error(e)
            if not is_retryable:
                raise

            effective_max_retries = min(max_retries, error_max_retries)
            if attempt >= effective_max_retries:
                logger.warning(
                    f"{operation_name}: Failed after {attempt + 1} attempts "
                    f"(limit={effective_max_retries + 1}). Last error: {e}"
                )
                raise YFinanceRetryError(
                    f"Failed after {attempt + 1} attempts: {e}",
                    last_error=e,
                ) from e

            delay = _calculate_backoff(attempt)
            total_backoff += delay
            logger.info(
                f"{operation_name}: Attempt {attempt + 1} failed ({e}). "
                f"Retrying in {delay:.1f}s..."
            )
            await asyncio.sleep(delay)

    raise YFinanceRetryError(f"Failed after {max_retries + 1} attempts")


async def fetch_info_with_provenance(symbol: str) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Fetch the yfinance info dict for a symbol.

    Returns:
        Tuple of (info_dict, retry provenance fields)

    Raises:
        ServerShuttingDownError: If server is shutting down
        YFinanceRetryError: If all retries exhausted for retryable errors
        ValueError: If symbol is invalid
    """
    if shutdown_event.is_set():
        raise ServerShuttingDownError("Server is shutting down")

    normalized_symbol = normalize_symbol(symbol)
    if not normalized_symbol:
        raise ValueError("Stock symbol is required")

    def _fetch() -> dict[str, Any]:
        info = yf.Ticker(normalized_symbol).info
        if not info:
            raise ValueError(f"Invalid symbol: {symbol}")

        completeness = assess_info_completeness(info)
        if completeness.is_incomplete:
            raise YFinanceIncompleteInfoError(
                normalized_symbol,
                key_count=completeness.key_count,
                sentinel_values_present=completeness.sentinel_values_present,
            )
        return info

    async with _fetch_semaphore:
        retry_result = await _retry_with_backoff(
            f"fetch_info({normalized_symbol})",
            _fetch,
        )
    return retry_result.result, retry_result.to_provenance()


async def fetch_info(symbol: str) -> dict[str, Any]:
    """Fetch the yfinance info dict for a symbol (see fetch_info_with_provenance)."""
    info, _ = await fetch_info_with_provenance(symbol)
    return info


async def fetch_fundamentals(symbol: str) -> tuple[FundamentalsInput, dict[str, Any]]:
    """Fetch and normalize fundamentals, returning (fundamentals, provenance fields)."""
    info, provenance = await fetch_info_with_provenance(symbol)
    return normalize_fundamentals(symbol, info), provenance


async def shutdown_executor() -> None:
    """Cleanup on server shutdown."""
    shutdown_event.set()
    _executor.shutdown(wait=False, cancel_futures=True)
