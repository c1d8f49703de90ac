"""
Rule-based archetype classification.

Deterministic fallback used when no AI credential is supplied. Each dimension
is evaluated in a fixed order; missing metrics default to 0 so every rule
falls through to its default branch instead of failing.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

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
from archetype_mcp.utils.validators import metric_or_default

logger = logging.getLogger(__name__)

RULE_BASED_THESIS = (
    "Rule-based analysis. For comprehensive AI-powered insights, "
    "provide an OpenAI or Anthropic API key."
)
RULE_BASED_RISK_FACTORS: tuple[str, ...] = (
    "Market volatility",
    "Competition",
    "Regulatory changes",
)
RULE_BASED_CATALYSTS: tuple[str, ...] = (
    "Revenue growth",
    "Margin expansion",
    "Market share gains",
)

# Fixed confidences per dimension
BUSINESS_MODEL_CONFIDENCE = 70
GROWTH_STAGE_CONFIDENCE = 85
INNOVATION_CONFIDENCE = 60
CAPITAL_EFFICIENCY_CONFIDENCE = 75
MARKET_POSITION_CONFIDENCE = 50
UNIT_ECONOMICS_CONFIDENCE = 80
SCALABILITY_CONFIDENCE = 75

# (strictly-greater-than threshold, stage), highest first
GROWTH_LADDER: tuple[tuple[float, GrowthStage], ...] = (
    (50, GrowthStage.HYPER_GROWTH),
    (30, GrowthStage.HIGH_GROWTH),
    (15, GrowthStage.SCALING),
    (5, GrowthStage.MATURE),
    (0, GrowthStage.SLOW_GROWTH),
)

BusinessModelRule = tuple[Callable[[str, str, str], bool], BusinessModel]


def _contains_any(text: str, *needles: str) -> bool:
    return any(needle in text for needle in needles)


# Ordered (predicate, label) pairs: first match wins.
# Predicates take (lower-cased description, industry, sector).
BUSINESS_MODEL_RULES: tuple[BusinessModelRule, ...] = (
    (lambda desc, ind, sec: _contains_any(desc, "platform", "marketplace"), BusinessModel.PLATFORM),
    (lambda desc, ind, sec: _contains_any(desc, "saas", "software as a service"), BusinessModel.SAAS),
    (lambda desc, ind, sec: _contains_any(desc, "ecommerce", "e-commerce"), BusinessModel.ECOMMERCE),
    (lambda desc, ind, sec: "Software" in ind, BusinessModel.SAAS),
    (lambda desc, ind, sec: "Technology" in sec, BusinessModel.ENTERPRISE),
)
DEFAULT_BUSINESS_MODEL = BusinessModel.ENTERPRISE


def classify_business_model(fundamentals: FundamentalsInput) -> DimensionAssignment:
    """Keyword scan of description, then industry, then sector."""
    desc = (fundamentals.description or "").lower()
    industry = fundamentals.industry or ""
    sector = fundamentals.sector or ""

    label = DEFAULT_BUSINESS_MODEL
    for predicate, candidate in BUSINESS_MODEL_RULES:
        if predicate(desc, industry, sector):
            label = candidate
            break

    return DimensionAssignment(
        label=label,
        confidence=BUSINESS_MODEL_CONFIDENCE,
        reasoning="Classified based on sector and industry keywords",
    )


def classify_growth_stage(fundamentals: FundamentalsInput) -> DimensionAssignment:
    growth = metric_or_default(fundamentals.metrics.revenue_growth)

    stage = GrowthStage.DECLINING
    for threshold, candidate in GROWTH_LADDER:
        if growth > threshold:
            stage = candidate
            break

    return DimensionAssignment(
        label=stage,
        confidence=GROWTH_STAGE_CONFIDENCE,
        reasoning=f"Revenue growth of {growth:.1f}%",
    )


def classify_moat(
    fundamentals: FundamentalsInput,
    business_model: BusinessModel,
) -> MoatAssignment:
    """Accumulate every moat whose condition holds; Weak Moat when none do."""
    labels: list[MoatType] = []
    if business_model in (BusinessModel.PLATFORM, BusinessModel.MARKETPLACE):
        labels.append(MoatType.NETWORK_EFFECTS)
    if business_model in (BusinessModel.SAAS, BusinessModel.ENTERPRISE):
        labels.append(MoatType.SWITCHING_COSTS)
    if metric_or_default(fundamentals.metrics.operating_margin) > 25:
        labels.append(MoatType.SCALE_ADVANTAGES)
    if not labels:
        labels.append(MoatType.WEAK_MOAT)

    if len(labels) > 1:
        strength = 70
    elif labels[0] is MoatType.WEAK_MOAT:
        strength = 30
    else:
        strength = 60

    return MoatAssignment(
        labels=tuple(labels),
        strength=strength,
        reasoning="Based on business model characteristics",
    )


def classify_innovation_velocity() -> DimensionAssignment:
    # No R&D or product-cycle signal in the fundamentals snapshot
    return DimensionAssignment(
        label=InnovationVelocity.STEADY_INNOVATOR,
        confidence=INNOVATION_CONFIDENCE,
        reasoning="Standard analysis - AI key recommended for deeper insight",
    )


def classify_capital_efficiency(
    fundamentals: FundamentalsInput,
    business_model: BusinessModel,
) -> DimensionAssignment:
    sector = fundamentals.sector or ""

    if business_model in (BusinessModel.SAAS, BusinessModel.PLATFORM):
        label = CapitalEfficiency.CAPITAL_LIGHT
    elif "Industrial" in sector or "Energy" in sector:
        label = CapitalEfficiency.CAPITAL_INTENSIVE
    else:
        label = CapitalEfficiency.BALANCED

    return DimensionAssignment(
        label=label,
        confidence=CAPITAL_EFFICIENCY_CONFIDENCE,
        reasoning="Based on business model and sector",
    )


def classify_market_position() -> DimensionAssignment:
    return DimensionAssignment(
        label=MarketPosition.COMPETITIVE_PLAYER,
        confidence=MARKET_POSITION_CONFIDENCE,
        reasoning="Market share data not available - AI key recommended",
    )


def classify_unit_economics(fundamentals: FundamentalsInput) -> DimensionAssignment:
    """
    Margin ladder on profit and operating margin.

    The < -10 check precedes < -30, so Broken is never reached. Kept as-is
    until the intended ordering is confirmed.
    """
    metrics = fundamentals.metrics
    profit_margin = metric_or_default(metrics.profit_margin)
    operating_margin = metric_or_default(metrics.operating_margin)

    if profit_margin > 15 and operating_margin > 20:
        label = UnitEconomics.STRONG
    elif profit_margin < -10:
        label = UnitEconomics.WEAK
    elif profit_margin < -30:
        label = UnitEconomics.BROKEN
    else:
        label = UnitEconomics.IMPROVING

    return DimensionAssignment(
        label=label,
        confidence=UNIT_ECONOMICS_CONFIDENCE,
        reasoning=(
            f"Profit margin: {_format_pct(metrics.profit_margin)}, "
            f"Operating margin: {_format_pct(metrics.operating_margin)}"
        ),
    )


def classify_scalability(business_model: BusinessModel) -> DimensionAssignment:
    if business_model in (BusinessModel.SAAS, BusinessModel.PLATFORM, BusinessModel.ADVERTISING):
        label = Scalability.HIGHLY_SCALABLE
    elif business_model is BusinessModel.HARDWARE:
        label = Scalability.LIMITED_SCALABILITY
    else:
        label = Scalability.MODERATELY_SCALABLE

    return DimensionAssignment(
        label=label,
        confidence=SCALABILITY_CONFIDENCE,
        reasoning="Based on business model",
    )


def classify(fundamentals: FundamentalsInput | Mapping[str, Any] | None) -> ArchetypeResult:
    """
    Assign one label per archetype dimension from a fundamentals snapshot.

    Pure and deterministic: no I/O, same input always yields the same result.

    Args:
        fundamentals: Normalized snapshot, or its camelCase dict form

    Returns:
        ArchetypeResult with all eight dimensions filled

    Raises:
        InvalidInputError: If fundamentals is None or not a mapping
    """
    if fundamentals is None:
        raise InvalidInputError("Fundamentals record is required")
    if not isinstance(fundamentals, FundamentalsInput):
        fundamentals = FundamentalsInput.from_dict(fundamentals)

    business_model = classify_business_model(fundamentals)
    growth_stage = classify_growth_stage(fundamentals)
    model = business_model.label

    result = ArchetypeResult(
        business_model=business_model,
        growth_stage=growth_stage,
        moat=classify_moat(fundamentals, model),
        innovation_velocity=classify_innovation_velocity(),
        capital_efficiency=classify_capital_efficiency(fundamentals, model),
        market_position=classify_market_position(),
        unit_economics=classify_unit_economics(fundamentals),
        scalability=classify_scalability(model),
        overall_archetype=f"{growth_stage.label.value} {model.value}",
        investment_thesis=RULE_BASED_THESIS,
        risk_factors=RULE_BASED_RISK_FACTORS,
        catalysts=RULE_BASED_CATALYSTS,
    )

    logger.debug(f"classify({fundamentals.symbol}): {result.overall_archetype}")
    return result


def _format_pct(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:.1f}%"
