"""
Archetype analyzer strategies.

One analyzer per provider, selected through AIProvider and an explicit
AnalyzerRegistry. The rule-based analyzer is always available; AI analyzers
are registered by the host application and must honour the prompt/response
contract defined here (build_archetype_prompt / parse_ai_response).
"""

import json
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol

from archetype_mcp.classifier.rules import classify
from archetype_mcp.models import (
    ArchetypeResult,
    BusinessModel,
    CapitalEfficiency,
    DimensionAssignment,
    FundamentalsInput,
    GrowthStage,
    InnovationVelocity,
    InvalidInputError,
    MarketPosition,
    MoatAssignment,
    MoatType,
    Scalability,
    UnitEconomics,
)
from archetype_mcp.prompts.templates import (
    ARCHETYPE_ANALYSIS_TEMPLATE,
    ARCHETYPE_SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)

RULE_BASED_METHOD = "Rule-based"
DESCRIPTION_PROMPT_LIMIT = 500


class ProviderUnavailableError(Exception):
    """Raised when an API key is supplied for a provider with no registered analyzer."""

    def __init__(self, provider: "AIProvider"):
        super().__init__(f"No analyzer registered for provider '{provider.value}'")
        self.provider = provider


class AIResponseError(ValueError):
    """Raised when AI output cannot be turned into an ArchetypeResult."""

    pass


class AIProvider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"

    @classmethod
    def parse(cls, name: "str | AIProvider | None") -> "AIProvider":
        """Case-insensitive lookup. None means the default provider (openai)."""
        if isinstance(name, cls):
            return name
        if name is None or not str(name).strip():
            return cls.OPENAI
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise InvalidInputError(
                f"Unknown AI provider '{name}'. Must be one of: {valid}"
            ) from None


class ArchetypeAnalyzer(Protocol):
    """Anything that turns fundamentals into an ArchetypeResult."""

    @property
    def method(self) -> str: ...

    def analyze(self, fundamentals: FundamentalsInput) -> ArchetypeResult: ...


class RuleBasedAnalyzer:
    """Deterministic analyzer backed by classifier.rules.classify."""

    method = RULE_BASED_METHOD

    def analyze(self, fundamentals: FundamentalsInput) -> ArchetypeResult:
        return classify(fundamentals)


AnalyzerFactory = Callable[[str], ArchetypeAnalyzer]


class AnalyzerRegistry:
    """Maps providers to analyzer factories. Passed explicitly, never global."""

    def __init__(self) -> None:
        self._factories: dict[AIProvider, AnalyzerFactory] = {}

    def register(self, provider: AIProvider, factory: AnalyzerFactory) -> None:
        self._factories[AIProvider.parse(provider)] = factory

    def unregister(self, provider: AIProvider) -> None:
        self._factories.pop(AIProvider.parse(provider), None)

    def providers(self) -> list[AIProvider]:
        return [p for p in AIProvider if p in self._factories]

    def create(self, provider: AIProvider, api_key: str) -> ArchetypeAnalyzer:
        factory = self._factories.get(provider)
        if factory is None:
            raise ProviderUnavailableError(provider)
        return factory(api_key)


def register_analyzer(
    registry: AnalyzerRegistry,
    provider: "AIProvider | str",
    factory: AnalyzerFactory,
) -> None:
    """Register an AI analyzer factory for a provider."""
    registry.register(AIProvider.parse(provider), factory)


def select_analyzer(
    api_key: str | None,
    provider: "AIProvider | str | None" = None,
    registry: AnalyzerRegistry | None = None,
) -> ArchetypeAnalyzer:
    """
    Choose the analyzer for a request.

    No API key selects the rule-based analyzer. With a key, the provider must
    have a factory in the registry.

    Raises:
        InvalidInputError: If provider name is unknown
        ProviderUnavailableError: If provider has no registered analyzer
    """
    resolved = AIProvider.parse(provider)
    if not api_key:
        return RuleBasedAnalyzer()
    if registry is None:
        raise ProviderUnavailableError(resolved)
    logger.debug(f"select_analyzer: using {resolved.value} analyzer")
    return registry.create(resolved, api_key)


def ai_method_label(provider: AIProvider) -> str:
    return f"AI-powered ({provider.value})"


# ============================================================================
# PROMPT / RESPONSE CONTRACT
# ============================================================================


def _fmt(value: float | None, decimals: int = 1, suffix: str = "") -> str:
    if value is None:
        return "n/a"
    return f"{value:.{decimals}f}{suffix}"


def build_archetype_prompt(fundamentals: FundamentalsInput) -> str:
    """Render the analysis prompt an AI analyzer sends to its model."""
    m = fundamentals.metrics
    market_cap = (
        f"${fundamentals.market_cap / 1e9:.2f}B"
        if fundamentals.market_cap is not None
        else "n/a"
    )
    description = (fundamentals.description or "")[:DESCRIPTION_PROMPT_LIMIT]

    return ARCHETYPE_ANALYSIS_TEMPLATE.format(
        name=fundamentals.name or fundamentals.symbol,
        symbol=fundamentals.symbol,
        sector=fundamentals.sector or "n/a",
        industry=fundamentals.industry or "n/a",
        market_cap=market_cap,
        description=description or "n/a",
        revenue_growth=_fmt(m.revenue_growth, suffix="%"),
        profit_margin=_fmt(m.profit_margin, suffix="%"),
        operating_margin=_fmt(m.operating_margin, suffix="%"),
        roe=_fmt(m.roe, suffix="%"),
        trailing_pe=_fmt(m.trailing_pe),
        debt_to_equity=_fmt(m.debt_to_equity, decimals=2),
        business_models=_choices(BusinessModel),
        growth_stages=_choices(GrowthStage),
        moat_types=_choices(MoatType),
        innovation_velocities=_choices(InnovationVelocity),
        capital_efficiencies=_choices(CapitalEfficiency),
        market_positions=_choices(MarketPosition),
        unit_economics=_choices(UnitEconomics),
        scalabilities=_choices(Scalability),
    )


def build_archetype_messages(fundamentals: FundamentalsInput) -> list[dict[str, str]]:
    """System and user chat messages for an AI analyzer."""
    return [
        {"role": "system", "content": ARCHETYPE_SYSTEM_PROMPT},
        {"role": "user", "content": build_archetype_prompt(fundamentals)},
    ]


def _choices(enum_cls: type[Enum]) -> str:
    return ", ".join(member.value for member in enum_cls)


def extract_json_text(content: str) -> str:
    """Strip a ```json (or bare ```) fence around model output, if present."""
    if "```json" in content:
        return content.split("```json", 1)[1].split("```", 1)[0].strip()
    if "```" in content:
        return content.split("```", 1)[1].split("```", 1)[0].strip()
    return content.strip()


def parse_ai_response(content: str) -> ArchetypeResult:
    """
    Parse model output into an ArchetypeResult.

    Raises:
        AIResponseError: If the text is not JSON or a label is not in the ontology
    """
    try:
        data = json.loads(extract_json_text(content))
    except (json.JSONDecodeError, TypeError) as e:
        raise AIResponseError(f"AI response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise AIResponseError("AI response must be a JSON object")

    moat_raw = data.get("moatType") or []
    if isinstance(moat_raw, str):
        moat_raw = [moat_raw]
    moat_labels = tuple(_label(MoatType, v, "moatType") for v in moat_raw)
    if not moat_labels:
        moat_labels = (MoatType.WEAK_MOAT,)

    business_model = _dimension(data, BusinessModel, "businessModel", "businessModelReasoning")
    growth_stage = _dimension(data, GrowthStage, "growthStage", "growthStageReasoning")

    return ArchetypeResult(
        business_model=business_model,
        growth_stage=growth_stage,
        moat=MoatAssignment(
            labels=moat_labels,
            strength=_confidence(data.get("moatStrength")),
            reasoning=str(data.get("moatReasoning") or ""),
        ),
        innovation_velocity=_dimension(
            data, InnovationVelocity, "innovationVelocity", "innovationReasoning"
        ),
        capital_efficiency=_dimension(
            data, CapitalEfficiency, "capitalEfficiency", "capitalReasoning"
        ),
        market_position=_dimension(
            data, MarketPosition, "marketPosition", "marketPositionReasoning"
        ),
        unit_economics=_dimension(data, UnitEconomics, "unitEconomics", "unitEconomicsReasoning"),
        scalability=_dimension(data, Scalability, "scalability", "scalabilityReasoning"),
        overall_archetype=str(
            data.get("overallArchetype")
            or f"{growth_stage.label.value} {business_model.label.value}"
        ),
        investment_thesis=str(data.get("investmentThesis") or ""),
        risk_factors=_string_list(data.get("riskFactors")),
        catalysts=_string_list(data.get("catalysts")),
    )


def _label(enum_cls: type[Enum], value: Any, key: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        raise AIResponseError(f"Unknown {key} label '{value}'") from None


def _dimension(
    data: dict[str, Any],
    enum_cls: type[Enum],
    key: str,
    reasoning_key: str,
) -> DimensionAssignment:
    if key not in data:
        raise AIResponseError(f"AI response missing '{key}'")
    return DimensionAssignment(
        label=_label(enum_cls, data[key], key),
        confidence=_confidence(data.get(f"{key}Confidence")),
        reasoning=str(data.get(reasoning_key) or ""),
    )


def _confidence(value: Any) -> int:
    """Clamp to an integer in 0-100; unparseable values become 0."""
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(100, number))


def _string_list(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)
