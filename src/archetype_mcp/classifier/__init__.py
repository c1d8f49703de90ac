"""Archetype classification: rules, ontology and analyzer strategies."""

from archetype_mcp.classifier.ontology import ARCHETYPE_ONTOLOGY, DIMENSIONS
from archetype_mcp.classifier.providers import (
    AIProvider,
    AIResponseError,
    AnalyzerRegistry,
    ArchetypeAnalyzer,
    ProviderUnavailableError,
    RuleBasedAnalyzer,
    build_archetype_messages,
    build_archetype_prompt,
    parse_ai_response,
    register_analyzer,
    select_analyzer,
)
from archetype_mcp.classifier.rules import classify

__all__ = [
    "ARCHETYPE_ONTOLOGY",
    "DIMENSIONS",
    "AIProvider",
    "AIResponseError",
    "AnalyzerRegistry",
    "ArchetypeAnalyzer",
    "ProviderUnavailableError",
    "RuleBasedAnalyzer",
    "build_archetype_messages",
    "build_archetype_prompt",
    "classify",
    "parse_ai_response",
    "register_analyzer",
    "select_analyzer",
]
