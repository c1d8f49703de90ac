"""
Archetype data models.

Labels are str-valued enums so they serialize as their display text.
Input records are frozen dataclasses; unknown metrics are None, never NaN.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from archetype_mcp.utils.validators import normalize_symbol, optional_text, safe_float


class InvalidInputError(ValueError):
    """Raised when the fundamentals record itself is missing or unusable."""

    pass


class BusinessModel(str, Enum):
    PLATFORM = "Platform"
    SAAS = "SaaS"
    MARKETPLACE = "Marketplace"
    HARDWARE = "Hardware"
    CONSUMER_SUBSCRIPTION = "Consumer Subscription"
    ENTERPRISE = "Enterprise"
    ECOMMERCE = "E-commerce"
    ADVERTISING = "Advertising"
    FINTECH = "Fintech"
    BIOTECH = "Biotech"


class GrowthStage(str, Enum):
    HYPER_GROWTH = "Hyper-Growth"
    HIGH_GROWTH = "High-Growth"
    SCALING = "Scaling"
    MATURE = "Mature"
    SLOW_GROWTH = "Slow-Growth"
    DECLINING = "Declining"


class MoatType(str, Enum):
    NETWORK_EFFECTS = "Network Effects"
    SWITCHING_COSTS = "Switching Costs"
    BRAND_POWER = "Brand Power"
    INTELLECTUAL_PROPERTY = "Intellectual Property"
    SCALE_ADVANTAGES = "Scale Advantages"
    DATA_MOAT = "Data Moat"
    REGULATORY_MOAT = "Regulatory Moat"
    WEAK_MOAT = "Weak Moat"


class InnovationVelocity(str, Enum):
    DISRUPTOR = "Disruptor"
    FAST_INNOVATOR = "Fast Innovator"
    STEADY_INNOVATOR = "Steady Innovator"
    SLOW_INNOVATOR = "Slow Innovator"
    LAGGARD = "Laggard"


class CapitalEfficiency(str, Enum):
    CAPITAL_LIGHT = "Capital Light"
    BALANCED = "Balanced"
    CAPITAL_INTENSIVE = "Capital Intensive"


class MarketPosition(str, Enum):
    DOMINANT_LEADER = "Dominant Leader"
    STRONG_CONTENDER = "Strong Contender"
    COMPETITIVE_PLAYER = "Competitive Player"
    NICHE_PLAYER = "Niche Player"
    SMALL_PLAYER = "Small Player"


class UnitEconomics(str, Enum):
    STRONG = "Strong"
    IMPROVING = "Improving"
    WEAK = "Weak"
    BROKEN = "Broken"


class Scalability(str, Enum):
    HIGHLY_SCALABLE = "Highly Scalable"
    MODERATELY_SCALABLE = "Moderately Scalable"
    LIMITED_SCALABILITY = "Limited Scalability"


# camelCase wire name -> Metrics attribute
METRIC_KEYS: dict[str, str] = {
    "revenueGrowth": "revenue_growth",
    "profitMargin": "profit_margin",
    "operatingMargin": "operating_margin",
    "roe": "roe",
    "trailingPE": "trailing_pe",
    "forwardPE": "forward_pe",
    "debtToEquity": "debt_to_equity",
    "earningsGrowth": "earnings_growth",
    "priceToBook": "price_to_book",
    "priceToSales": "price_to_sales",
    "currentRatio": "current_ratio",
    "freeCashflow": "free_cashflow",
    "operatingCashflow": "operating_cashflow",
}


@dataclass(frozen=True)
class Metrics:
    """
    Fundamental ratios. Growth, margin and ROE values are percentages
    (12.5 means 12.5%). Any value may be None.
    """

    revenue_growth: float | None = None
    profit_margin: float | None = None
    operating_margin: float | None = None
    roe: float | None = None
    trailing_pe: float | None = None
    forward_pe: float | None = None
    debt_to_equity: float | None = None
    earnings_growth: float | None = None
    price_to_book: float | None = None
    price_to_sales: float | None = None
    current_ratio: float | None = None
    free_cashflow: float | None = None
    operating_cashflow: float | None = None

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, safe_float(getattr(self, f.name)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Metrics":
        """Build from a camelCase mapping. Unknown keys and non-mappings are ignored."""
        if not isinstance(data, Mapping) or not data:
            return cls()
        kwargs = {attr: data.get(key) for key, attr in METRIC_KEYS.items() if key in data}
        return cls(**kwargs)

    def to_dict(self) -> dict[str, float | None]:
        return {key: getattr(self, attr) for key, attr in METRIC_KEYS.items()}


@dataclass(frozen=True)
class FundamentalsInput:
    """Normalized company snapshot fed to the classifier."""

    symbol: str = ""
    name: str | None = None
    sector: str | None = None
    industry: str | None = None
    description: str | None = None
    market_cap: float | None = None
    metrics: Metrics = field(default_factory=Metrics)

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol", normalize_symbol(self.symbol))
        for name in ("name", "sector", "industry", "description"):
            object.__setattr__(self, name, optional_text(getattr(self, name)))
        object.__setattr__(self, "market_cap", safe_float(self.market_cap))
        if self.metrics is None:
            object.__setattr__(self, "metrics", Metrics())
        elif isinstance(self.metrics, Mapping):
            object.__setattr__(self, "metrics", Metrics.from_dict(self.metrics))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "FundamentalsInput":
        """
        Build from the camelCase shape returned by the data layer.

        Raises:
            InvalidInputError: If data is None or not a mapping
        """
        if data is None:
            raise InvalidInputError("Fundamentals record is required")
        if not isinstance(data, Mapping):
            raise InvalidInputError(
                f"Fundamentals must be a mapping, got {type(data).__name__}"
            )
        return cls(
            symbol=data.get("symbol") or "",
            name=data.get("name"),
            sector=data.get("sector"),
            industry=data.get("industry"),
            description=data.get("description"),
            market_cap=data.get("marketCap"),
            metrics=Metrics.from_dict(data.get("metrics")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "sector": self.sector,
            "industry": self.industry,
            "description": self.description,
            "marketCap": self.market_cap,
            "metrics": self.metrics.to_dict(),
        }


@dataclass(frozen=True)
class DimensionAssignment:
    """One label for one classification dimension."""

    label: Enum
    confidence: int
    reasoning: str


@dataclass(frozen=True)
class MoatAssignment:
    """Accumulated moat labels. Never empty."""

    labels: tuple[MoatType, ...]
    strength: int
    reasoning: str


@dataclass(frozen=True)
class ArchetypeResult:
    """Eight dimension assignments plus the aggregate narrative fields."""

    business_model: DimensionAssignment
    growth_stage: DimensionAssignment
    moat: MoatAssignment
    innovation_velocity: DimensionAssignment
    capital_efficiency: DimensionAssignment
    market_position: DimensionAssignment
    unit_economics: DimensionAssignment
    scalability: DimensionAssignment
    overall_archetype: str
    investment_thesis: str
    risk_factors: tuple[str, ...]
    catalysts: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Flat camelCase shape used by the dashboard."""

        def _dim(prefix: str, reasoning_key: str, dim: DimensionAssignment) -> dict[str, Any]:
            return {
                prefix: dim.label.value,
                f"{prefix}Confidence": dim.confidence,
                reasoning_key: dim.reasoning,
            }

        out: dict[str, Any] = {}
        out.update(_dim("businessModel", "businessModelReasoning", self.business_model))
        out.update(_dim("growthStage", "growthStageReasoning", self.growth_stage))
        out["moatType"] = [label.value for label in self.moat.labels]
        out["moatStrength"] = self.moat.strength
        out["moatReasoning"] = self.moat.reasoning
        out.update(
            _dim("innovationVelocity", "innovationReasoning", self.innovation_velocity)
        )
        out.update(_dim("capitalEfficiency", "capitalReasoning", self.capital_efficiency))
        out.update(_dim("marketPosition", "marketPositionReasoning", self.market_position))
        out.update(_dim("unitEconomics", "unitEconomicsReasoning", self.unit_economics))
        out.update(_dim("scalability", "scalabilityReasoning", self.scalability))
        out["overallArchetype"] = self.overall_archetype
        out["investmentThesis"] = self.investment_thesis
        out["riskFactors"] = list(self.risk_factors)
        out["catalysts"] = list(self.catalysts)
        return out
