"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from archetype_mcp.models import FundamentalsInput, Metrics


@pytest.fixture
def saas_platform_dict() -> dict[str, Any]:
    """camelCase fundamentals whose description mentions both SaaS and platform."""
    return {
        "symbol": "crm",
        "name": "Salesforce, Inc.",
        "sector": "Technology",
        "industry": "Software - Application",
        "description": "Salesforce is a leading SaaS platform for customer relationship management.",
        "marketCap": 250_000_000_000,
        "metrics": {
            "revenueGrowth": 62.0,
            "profitMargin": 18.0,
            "operatingMargin": 28.0,
            "roe": 9.5,
            "trailingPE": 45.2,
        },
    }


@pytest.fixture
def bare_fundamentals() -> FundamentalsInput:
    """Symbol only: no text, no metrics."""
    return FundamentalsInput(symbol="XYZ")


@pytest.fixture
def make_fundamentals():
    """Factory for FundamentalsInput with keyword metric overrides."""

    def _make(
        symbol: str = "TEST",
        description: str | None = None,
        sector: str | None = None,
        industry: str | None = None,
        **metrics: float | None,
    ) -> FundamentalsInput:
        return FundamentalsInput(
            symbol=symbol,
            description=description,
            sector=sector,
            industry=industry,
            metrics=Metrics(**metrics),
        )

    return _make


@pytest.fixture
def yfinance_info() -> dict[str, Any]:
    """Trimmed yfinance Ticker.info payload for an equity."""
    return {
        "symbol": "SHOP",
        "quoteType": "EQUITY",
        "shortName": "Shopify Inc.",
        "longName": "Shopify Inc.",
        "sector": "Technology",
        "industry": "Software - Application",
        "longBusinessSummary": "Shopify Inc. provides a commerce platform\nfor merchants.",
        "marketCap": 140_000_000_000,
        "revenueGrowth": 0.262,
        "profitMargins": 0.2235,
        "operatingMargins": 0.119,
        "returnOnEquity": 0.1524,
        "earningsGrowth": float("nan"),
        "trailingPE": 78.4,
        "forwardPE": 70.1,
        "priceToBook": 12.3,
        "priceToSalesTrailing12Months": 15.9,
        "currentRatio": 7.8,
        "debtToEquity": 9.6,
        "freeCashflow": 1_600_000_000,
        "operatingCashflow": 1_620_000_000,
    }
