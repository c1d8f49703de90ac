"""Archetype analysis tools."""

from archetype_mcp.tools.archetype import analyze_archetype, archetype_ontology

__all__ = [
    "analyze_archetype",
    "archetype_ontology",
]
