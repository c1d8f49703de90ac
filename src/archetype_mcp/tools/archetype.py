"""Business archetype analysis tool."""

import logging
from datetime import datetime
from time import perf_counter
from typing import Any

from archetype_mcp.classifier.ontology import (
    ARCHETYPE_ONTOLOGY,
    DIMENSIONS,
    ONTOLOGY_DESCRIPTION,
)
from archetype_mcp.classifier.providers import (
    AIProvider,
    AnalyzerRegistry,
    ProviderUnavailableError,
    ai_method_label,
    select_analyzer,
)
from archetype_mcp.data.cache import FundamentalsCache
from archetype_mcp.data.yfinance_client import fetch_fundamentals
from archetype_mcp.models import InvalidInputError
from archetype_mcp.utils.provenance import build_error_response, build_meta, build_provenance
from archetype_mcp.utils.validators import normalize_symbol

logger = logging.getLogger(__name__)

TOOL_NAME = "analyze_archetype"

RULE_BASED_NOTE = "Rule-based analysis. Provide an AI API key for deeper insights."
AI_NOTE = "AI-powered archetype analysis"


async def analyze_archetype(
    symbol: str,
    api_key: str | None = None,
    ai_provider: str | None = None,
    cache: FundamentalsCache | None = None,
    registry: AnalyzerRegistry | None = None,
) -> dict[str, Any]:
    """
    Classify a company's business archetype from its fundamentals.

    Without an API key the deterministic rule-based analyzer is used.

    Args:
        symbol: Stock ticker symbol
        api_key: AI provider credential (optional)
        ai_provider: "openai" or "anthropic" (default: openai)
        cache: Fundamentals cache to consult before fetching (optional)
        registry: AI analyzer registry (required when api_key is given)

    Returns:
        Dict with company metadata, raw fundamentals, archetype and analysis method
    """
    start_time = perf_counter()

    normalized_symbol = normalize_symbol(symbol)
    if not normalized_symbol:
        return build_error_response(
            error_type="invalid_input",
            message="Stock symbol is required",
            tool=TOOL_NAME,
        )

    # Provider problems are reported before any network fetch
    try:
        provider = AIProvider.parse(ai_provider)
        analyzer = select_analyzer(api_key, provider, registry)
    except (InvalidInputError, ProviderUnavailableError) as e:
        return build_error_response(
            error_type="invalid_input",
            message=str(e),
            symbol=normalized_symbol,
            tool=TOOL_NAME,
        )

    fundamentals = cache.get(normalized_symbol) if cache is not None else None
    if fundamentals is not None:
        source_provenance = build_provenance(source="cache", cache_hit=True)
    else:
        try:
            fundamentals, retry_provenance = await fetch_fundamentals(normalized_symbol)
        except ValueError as e:
            return build_error_response(
                error_type="invalid_symbol",
                message=str(e),
                symbol=normalized_symbol,
                tool=TOOL_NAME,
            )
        except Exception as e:
            logger.warning(f"{TOOL_NAME}({normalized_symbol}): fetch failed: {e}")
            return build_error_response(
                error_type="data_unavailable",
                message=f"Failed to fetch fundamental data: {e}",
                symbol=normalized_symbol,
                tool=TOOL_NAME,
            )
        if cache is not None:
            cache.store(fundamentals)
        source_provenance = build_provenance(
            source="yfinance",
            as_of=datetime.utcnow().isoformat() + "Z",
            cache_hit=False,
            **retry_provenance,
        )

    is_ai = bool(api_key)
    try:
        archetype = analyzer.analyze(fundamentals)
    except Exception as e:
        logger.warning(f"{TOOL_NAME}({normalized_symbol}): analyzer failed: {e}")
        return build_error_response(
            error_type="analysis_failed",
            message=f"AI analysis failed: {e}" if is_ai else f"Analysis failed: {e}",
            symbol=normalized_symbol,
            tool=TOOL_NAME,
        )

    method = ai_method_label(provider) if is_ai else analyzer.method
    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta(TOOL_NAME, duration_ms),
        "data_provenance": {
            "fundamentals": source_provenance,
            "archetype": build_provenance(source=method),
        },
        "success": True,
        "symbol": fundamentals.symbol,
        "companyName": fundamentals.name,
        "sector": fundamentals.sector,
        "industry": fundamentals.industry,
        "marketCap": fundamentals.market_cap,
        "fundamentals": fundamentals.metrics.to_dict(),
        "archetype": archetype.to_dict(),
        "analysisMethod": method,
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "note": AI_NOTE if is_ai else RULE_BASED_NOTE,
    }


def archetype_ontology() -> dict[str, Any]:
    """Archetype ontology reference: every dimension with its labels."""
    return {
        "meta": build_meta("archetype_ontology"),
        "success": True,
        "ontology": ARCHETYPE_ONTOLOGY,
        "description": ONTOLOGY_DESCRIPTION,
        "dimensions": list(DIMENSIONS),
    }
