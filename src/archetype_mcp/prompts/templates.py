"""Prompt templates for archetype analysis."""

from typing import Any

ARCHETYPE_SYSTEM_PROMPT = (
    "You are a business archetype analysis AI. You always respond with valid JSON only."
)

# Filled by classifier.providers.build_archetype_prompt
ARCHETYPE_ANALYSIS_TEMPLATE = """Analyze the following company and assign business archetype labels.

Company: {name} ({symbol})
Sector: {sector}
Industry: {industry}
Market Cap: {market_cap}

Description: {description}

Financial Metrics:
- Revenue Growth: {revenue_growth}
- Profit Margin: {profit_margin}
- Operating Margin: {operating_margin}
- ROE: {roe}
- P/E Ratio: {trailing_pe}
- Debt/Equity: {debt_to_equity}

Based on this data, provide a JSON response with the following archetype classifications:

{{
  "businessModel": "one of: {business_models}",
  "businessModelConfidence": 0-100,
  "businessModelReasoning": "brief explanation",

  "growthStage": "one of: {growth_stages}",
  "growthStageConfidence": 0-100,
  "growthStageReasoning": "brief explanation",

  "moatType": ["array of: {moat_types}"],
  "moatStrength": 0-100,
  "moatReasoning": "brief explanation",

  "innovationVelocity": "one of: {innovation_velocities}",
  "innovationVelocityConfidence": 0-100,
  "innovationReasoning": "brief explanation",

  "capitalEfficiency": "one of: {capital_efficiencies}",
  "capitalEfficiencyConfidence": 0-100,
  "capitalReasoning": "brief explanation",

  "marketPosition": "one of: {market_positions}",
  "marketPositionConfidence": 0-100,
  "marketPositionReasoning": "brief explanation",

  "unitEconomics": "one of: {unit_economics}",
  "unitEconomicsConfidence": 0-100,
  "unitEconomicsReasoning": "brief explanation",

  "scalability": "one of: {scalabilities}",
  "scalabilityConfidence": 0-100,
  "scalabilityReasoning": "brief explanation",

  "overallArchetype": "a unique 2-4 word label that captures the company's essence",
  "investmentThesis": "2-3 sentence summary of key investment considerations",
  "riskFactors": ["array of 3-5 key risks"],
  "catalysts": ["array of 3-5 potential positive catalysts"]
}}

Return ONLY valid JSON, no additional text."""

# MCP prompt definitions
PROMPTS = {
    "archetype_memo": {
        "description": "Explain a company's business archetype using the analysis tools",
        "arguments": [{"name": "symbol", "required": True}],
    },
}


def list_prompts() -> list[dict[str, Any]]:
    """List available prompts."""
    return [
        {
            "name": name,
            "description": info["description"],
            "arguments": info["arguments"],
        }
        for name, info in PROMPTS.items()
    ]


def get_prompt(name: str, arguments: dict[str, str]) -> dict[str, Any] | None:
    """
    Get a prompt by name with arguments filled in.

    Returns dict with 'messages' key for MCP GetPromptResult.
    """
    if name not in PROMPTS:
        return None

    symbol = arguments.get("symbol", "").upper().strip()
    return {
        "messages": [
            {
                "role": "user",
                "content": f"""Write a business archetype memo for {symbol}.

Execute these tools in order:
1. get_archetype_ontology()
2. get_archetype("{symbol}")

Then write the memo with these sections:

1. **Archetype**: the overallArchetype label and the analysisMethod used
2. **Dimensions**: a table of the eight dimensions with label, confidence and reasoning
3. **Moat**: moat types and moat strength, with one sentence per moat
4. **Fundamentals**: revenue growth, profit margin, operating margin, ROE, P/E
5. **Risks and Catalysts**: the riskFactors and catalysts lists

When analysisMethod is "Rule-based", note that innovation velocity and market
position are placeholders and carry low confidence.""",
            }
        ]
    }
