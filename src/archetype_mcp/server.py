"""Business Archetype MCP Server using FastMCP."""

import json
import logging
import os

from fastmcp import FastMCP

from archetype_mcp import SCHEMA_VERSION, SERVER_VERSION
from archetype_mcp.classifier.ontology import ARCHETYPE_ONTOLOGY
from archetype_mcp.classifier.providers import AnalyzerRegistry
from archetype_mcp.data.cache import FundamentalsCache
from archetype_mcp.prompts.templates import get_prompt
from archetype_mcp.tools import analyze_archetype, archetype_ontology

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
logger = logging.getLogger(__name__)

# Created once per process and handed to the tools
fundamentals_cache = FundamentalsCache()
analyzer_registry = AnalyzerRegistry()

mcp = FastMCP(
    name="archetype-analysis",
)


# ============================================================================
# TOOLS
# ============================================================================


@mcp.tool
async def get_archetype(
    symbol: str,
    api_key: str | None = None,
    ai_provider: str = "openai",
) -> str:
    """
    Classify a company's business archetype across eight dimensions.

    Dimensions: business model, growth stage, moat type, innovation velocity,
    capital efficiency, market position, unit economics, scalability.
    Without an API key the deterministic rule-based analyzer is used.

    Args:
        symbol: Stock ticker symbol (e.g., CRM, SHOP, XOM)
        api_key: OpenAI or Anthropic API key (optional)
        ai_provider: "openai" or "anthropic" (default: openai)

    Returns:
        JSON with company info, fundamentals, archetype labels and analysisMethod
    """
    result = await analyze_archetype(
        symbol=symbol,
        api_key=api_key,
        ai_provider=ai_provider,
        cache=fundamentals_cache,
        registry=analyzer_registry,
    )
    return json.dumps(result, indent=2, default=str)


@mcp.tool
def get_archetype_ontology() -> str:
    """
    Get the archetype ontology: every dimension with its labels and descriptions.

    Returns:
        JSON with ontology, description and dimension names
    """
    return json.dumps(archetype_ontology(), indent=2, default=str)


# ============================================================================
# RESOURCES
# ============================================================================


@mcp.resource("archetype://ontology/{dimension}")
def get_dimension_ontology(dimension: str) -> str:
    """
    Get the ontology entries of a single dimension as JSON.

    Args:
        dimension: camelCase dimension key (e.g., businessModel, growthStage)
    """
    entries = ARCHETYPE_ONTOLOGY.get(dimension)
    if entries is None:
        valid = ", ".join(ARCHETYPE_ONTOLOGY)
        return f"Error: unknown dimension '{dimension}'. Must be one of: {valid}"
    return json.dumps(entries, indent=2)


# ============================================================================
# PROMPTS
# ============================================================================


@mcp.prompt
def archetype_memo(symbol: str) -> str:
    """Explain a company's business archetype using the analysis tools."""
    result = get_prompt("archetype_memo", {"symbol": symbol})
    if result:
        return result["messages"][0]["content"]
    return f"Analyze the business archetype of {symbol} using get_archetype."


# ============================================================================
# ENTRY POINT
# ============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info(
        f"Starting Business Archetype MCP Server v{SERVER_VERSION} (schema v{SCHEMA_VERSION})"
    )
    mcp.run()


if __name__ == "__main__":
    main()
