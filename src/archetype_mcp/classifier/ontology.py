"""Archetype ontology reference table."""

from typing import Any

DIMENSIONS: tuple[str, ...] = (
    "Business Model Archetype",
    "Growth Stage",
    "Competitive Moat Type",
    "Innovation Velocity",
    "Capital Efficiency",
    "Market Position",
    "Unit Economics Health",
    "Scalability Potential",
)

ONTOLOGY_DESCRIPTION = "Business archetype classification system"

ARCHETYPE_ONTOLOGY: dict[str, list[dict[str, Any]]] = {
    "businessModel": [
        {"label": "Platform", "description": "Multi-sided marketplace connecting users", "examples": ["UBER", "ABNB"]},
        {"label": "SaaS", "description": "Software-as-a-Service recurring revenue", "examples": ["CRM", "SNOW"]},
        {"label": "Marketplace", "description": "Transaction-based intermediary", "examples": ["ETSY", "EBAY"]},
        {"label": "Hardware", "description": "Physical product manufacturing", "examples": ["AAPL", "TSLA"]},
        {"label": "Consumer Subscription", "description": "Recurring consumer services", "examples": ["NFLX", "SPOT"]},
        {"label": "Enterprise", "description": "B2B solutions and services", "examples": ["ORCL", "IBM"]},
        {"label": "E-commerce", "description": "Direct online retail", "examples": ["AMZN", "SHOP"]},
        {"label": "Advertising", "description": "Monetization via ads", "examples": ["GOOGL", "META"]},
        {"label": "Fintech", "description": "Financial technology services", "examples": ["SQ", "PYPL"]},
        {"label": "Biotech", "description": "Drug development and therapeutics", "examples": ["MRNA", "REGN"]},
    ],
    "growthStage": [
        {"label": "Hyper-Growth", "description": "Revenue growth >50% YoY", "threshold": {"revenueGrowth": 50}},
        {"label": "High-Growth", "description": "Revenue growth 30-50% YoY", "threshold": {"revenueGrowth": 30}},
        {"label": "Scaling", "description": "Revenue growth 15-30% YoY", "threshold": {"revenueGrowth": 15}},
        {"label": "Mature", "description": "Revenue growth 5-15% YoY", "threshold": {"revenueGrowth": 5}},
        {"label": "Slow-Growth", "description": "Revenue growth 0-5% YoY", "threshold": {"revenueGrowth": 0}},
        {"label": "Declining", "description": "Negative revenue growth", "threshold": {"revenueGrowth": -100}},
    ],
    "moatType": [
        {"label": "Network Effects", "description": "Value increases with users", "indicators": ["platform", "marketplace"]},
        {"label": "Switching Costs", "description": "High cost to change providers", "indicators": ["enterprise", "saas"]},
        {"label": "Brand Power", "description": "Strong brand recognition", "indicators": ["consumer", "luxury"]},
        {"label": "Intellectual Property", "description": "Patents and proprietary tech", "indicators": ["biotech", "pharma"]},
        {"label": "Scale Advantages", "description": "Cost advantages from size", "indicators": ["manufacturing", "logistics"]},
        {"label": "Data Moat", "description": "Proprietary data accumulation", "indicators": ["ai", "analytics"]},
        {"label": "Regulatory Moat", "description": "Protected by regulations", "indicators": ["utilities", "telecom"]},
        {"label": "Weak Moat", "description": "Limited competitive advantages", "indicators": ["commodity"]},
    ],
    "innovationVelocity": [
        {"label": "Disruptor", "description": "Creating new markets", "characteristics": ["high R&D", "negative earnings", "high growth"]},
        {"label": "Fast Innovator", "description": "Rapid product cycles", "characteristics": ["tech", "consumer electronics"]},
        {"label": "Steady Innovator", "description": "Consistent improvements", "characteristics": ["enterprise", "industrial"]},
        {"label": "Slow Innovator", "description": "Infrequent major changes", "characteristics": ["mature", "regulated"]},
        {"label": "Laggard", "description": "Playing catch-up", "characteristics": ["declining", "legacy"]},
    ],
    "capitalEfficiency": [
        {"label": "Capital Light", "description": "Low capex requirements", "threshold": {"capexToRevenue": 5}},
        {"label": "Balanced", "description": "Moderate capital needs", "threshold": {"capexToRevenue": 15}},
        {"label": "Capital Intensive", "description": "High capex requirements", "threshold": {"capexToRevenue": 100}},
    ],
    "marketPosition": [
        {"label": "Dominant Leader", "description": ">50% market share", "threshold": {"marketShare": 50}},
        {"label": "Strong Contender", "description": "20-50% market share", "threshold": {"marketShare": 20}},
        {"label": "Competitive Player", "description": "10-20% market share", "threshold": {"marketShare": 10}},
        {"label": "Niche Player", "description": "5-10% market share", "threshold": {"marketShare": 5}},
        {"label": "Small Player", "description": "<5% market share", "threshold": {"marketShare": 0}},
    ],
    "unitEconomics": [
        {"label": "Strong", "description": "High margins, positive CAC/LTV", "threshold": {"grossMargin": 60, "netMargin": 15}},
        {"label": "Improving", "description": "Expanding margins", "threshold": {"grossMargin": 40, "netMargin": 0}},
        {"label": "Weak", "description": "Low margins", "threshold": {"grossMargin": 20, "netMargin": -10}},
        {"label": "Broken", "description": "Unsustainable economics", "threshold": {"grossMargin": 0, "netMargin": -100}},
    ],
    "scalability": [
        {"label": "Highly Scalable", "description": "Software-like economics", "characteristics": ["saas", "platform", "digital"]},
        {"label": "Moderately Scalable", "description": "Some variable costs", "characteristics": ["marketplace", "services"]},
        {"label": "Limited Scalability", "description": "Linear cost structure", "characteristics": ["hardware", "manufacturing"]},
    ],
}


def labels_for(dimension: str) -> list[str]:
    """Ordered labels of one dimension (camelCase key)."""
    if dimension not in ARCHETYPE_ONTOLOGY:
        raise KeyError(f"Unknown archetype dimension '{dimension}'")
    return [entry["label"] for entry in ARCHETYPE_ONTOLOGY[dimension]]
