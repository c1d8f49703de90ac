"""Tests for analyzer selection and the AI prompt/response contract."""

import json

import pytest

from archetype_mcp.classifier.providers import (
    AIProvider,
    AIResponseError,
    AnalyzerRegistry,
    ProviderUnavailableError,
    RuleBasedAnalyzer,
    ai_method_label,
    build_archetype_messages,
    build_archetype_prompt,
    extract_json_text,
    parse_ai_response,
    register_analyzer,
    select_analyzer,
)
from archetype_mcp.classifier.rules import classify
from archetype_mcp.models import (
    BusinessModel,
    FundamentalsInput,
    InvalidInputError,
    MoatType,
    UnitEconomics,
)

AI_PAYLOAD = {
    "businessModel": "Advertising",
    "businessModelConfidence": 92,
    "businessModelReasoning": "Most revenue from ads",
    "growthStage": "Mature",
    "growthStageConfidence": 88,
    "growthStageReasoning": "Low double-digit growth",
    "moatType": ["Network Effects", "Data Moat"],
    "moatStrength": 85,
    "moatReasoning": "Billions of users",
    "innovationVelocity": "Fast Innovator",
    "innovationVelocityConfidence": 70,
    "innovationReasoning": "AI investment",
    "capitalEfficiency": "Balanced",
    "capitalEfficiencyConfidence": 65,
    "capitalReasoning": "Heavy datacenter capex",
    "marketPosition": "Dominant Leader",
    "marketPositionConfidence": 90,
    "marketPositionReasoning": "Top share in social ads",
    "unitEconomics": "Strong",
    "unitEconomicsConfidence": 95,
    "unitEconomicsReasoning": "35% net margin",
    "scalability": "Highly Scalable",
    "scalabilityConfidence": 90,
    "scalabilityReasoning": "Software economics",
    "overallArchetype": "Attention Monopolist",
    "investmentThesis": "Cash machine funding AI bets.",
    "riskFactors": ["Regulation", "Ad cyclicality", "Capex overrun"],
    "catalysts": ["AI ad tools", "Messaging monetization", "Buybacks"],
}


class _FakeAnalyzer:
    method = "fake"

    def __init__(self, api_key: str):
        self.api_key = api_key

    def analyze(self, fundamentals):
        return classify(fundamentals)


class TestAIProvider:
    """Tests for provider parsing."""

    def test_parse_case_insensitive(self) -> None:
        assert AIProvider.parse("Anthropic") is AIProvider.ANTHROPIC

    def test_parse_default(self) -> None:
        assert AIProvider.parse(None) is AIProvider.OPENAI
        assert AIProvider.parse("") is AIProvider.OPENAI

    def test_parse_unknown(self) -> None:
        with pytest.raises(InvalidInputError, match="Unknown AI provider"):
            AIProvider.parse("gemini")

    def test_method_label(self) -> None:
        assert ai_method_label(AIProvider.ANTHROPIC) == "AI-powered (anthropic)"


class TestSelectAnalyzer:
    """Tests for analyzer selection."""

    def test_no_key_rule_based(self) -> None:
        analyzer = select_analyzer(None, "anthropic", AnalyzerRegistry())
        assert isinstance(analyzer, RuleBasedAnalyzer)
        assert analyzer.method == "Rule-based"

    def test_key_without_registration(self) -> None:
        with pytest.raises(ProviderUnavailableError, match="openai"):
            select_analyzer("sk-test", "openai", AnalyzerRegistry())

    def test_key_without_registry(self) -> None:
        with pytest.raises(ProviderUnavailableError):
            select_analyzer("sk-test", "openai")

    def test_registered_provider(self) -> None:
        registry = AnalyzerRegistry()
        register_analyzer(registry, "anthropic", _FakeAnalyzer)

        analyzer = select_analyzer("key-123", AIProvider.ANTHROPIC, registry)

        assert isinstance(analyzer, _FakeAnalyzer)
        assert analyzer.api_key == "key-123"
        assert registry.providers() == [AIProvider.ANTHROPIC]

    def test_unregister(self) -> None:
        registry = AnalyzerRegistry()
        register_analyzer(registry, AIProvider.OPENAI, _FakeAnalyzer)
        registry.unregister(AIProvider.OPENAI)
        assert registry.providers() == []

    def test_rule_based_matches_classify(self, saas_platform_dict) -> None:
        f = FundamentalsInput.from_dict(saas_platform_dict)
        assert RuleBasedAnalyzer().analyze(f) == classify(f)


class TestBuildPrompt:
    """Tests for prompt rendering."""

    def test_embeds_company_and_metrics(self, saas_platform_dict) -> None:
        prompt = build_archetype_prompt(FundamentalsInput.from_dict(saas_platform_dict))

        assert "Company: Salesforce, Inc. (CRM)" in prompt
        assert "Market Cap: $250.00B" in prompt
        assert "Revenue Growth: 62.0%" in prompt
        assert "P/E Ratio: 45.2" in prompt
        assert "Debt/Equity: n/a" in prompt

    def test_lists_every_label(self, bare_fundamentals) -> None:
        prompt = build_archetype_prompt(bare_fundamentals)
        for label in ("Consumer Subscription", "Regulatory Moat", "Laggard", "Broken"):
            assert label in prompt

    def test_truncates_description(self) -> None:
        f = FundamentalsInput(symbol="LONG", description="x" * 900)
        prompt = build_archetype_prompt(f)
        assert "x" * 500 in prompt
        assert "x" * 501 not in prompt

    def test_missing_market_cap(self, bare_fundamentals) -> None:
        assert "Market Cap: n/a" in build_archetype_prompt(bare_fundamentals)

    def test_chat_messages(self, saas_platform_dict) -> None:
        """System prompt first, rendered analysis prompt second."""
        f = FundamentalsInput.from_dict(saas_platform_dict)
        messages = build_archetype_messages(f)

        assert [m["role"] for m in messages] == ["system", "user"]
        assert "valid JSON" in messages[0]["content"]
        assert messages[1]["content"] == build_archetype_prompt(f)


class TestParseAIResponse:
    """Tests for parsing model output."""

    def test_plain_json(self) -> None:
        result = parse_ai_response(json.dumps(AI_PAYLOAD))

        assert result.business_model.label is BusinessModel.ADVERTISING
        assert result.business_model.confidence == 92
        assert result.moat.labels == (MoatType.NETWORK_EFFECTS, MoatType.DATA_MOAT)
        assert result.unit_economics.label is UnitEconomics.STRONG
        assert result.overall_archetype == "Attention Monopolist"
        assert result.to_dict()["innovationReasoning"] == "AI investment"

    def test_json_fence(self) -> None:
        text = "Here you go:\n```json\n" + json.dumps(AI_PAYLOAD) + "\n```\nDone."
        assert parse_ai_response(text).market_position.confidence == 90

    def test_bare_fence(self) -> None:
        text = "```\n" + json.dumps(AI_PAYLOAD) + "\n```"
        assert parse_ai_response(text).scalability.confidence == 90

    def test_extract_without_fence(self) -> None:
        assert extract_json_text('  {"a": 1} ') == '{"a": 1}'

    def test_invalid_json(self) -> None:
        with pytest.raises(AIResponseError, match="not valid JSON"):
            parse_ai_response("I think it's a SaaS company.")

    def test_non_object(self) -> None:
        with pytest.raises(AIResponseError, match="JSON object"):
            parse_ai_response("[1, 2, 3]")

    def test_unknown_label(self) -> None:
        payload = dict(AI_PAYLOAD, businessModel="Conglomerate")
        with pytest.raises(AIResponseError, match="Conglomerate"):
            parse_ai_response(json.dumps(payload))

    def test_missing_dimension(self) -> None:
        payload = {k: v for k, v in AI_PAYLOAD.items() if k != "growthStage"}
        with pytest.raises(AIResponseError, match="growthStage"):
            parse_ai_response(json.dumps(payload))

    def test_confidence_clamped(self) -> None:
        payload = dict(AI_PAYLOAD, growthStageConfidence=140, scalabilityConfidence="high")
        result = parse_ai_response(json.dumps(payload))
        assert result.growth_stage.confidence == 100
        assert result.scalability.confidence == 0

    def test_empty_moat_falls_back(self) -> None:
        payload = dict(AI_PAYLOAD, moatType=[])
        assert parse_ai_response(json.dumps(payload)).moat.labels == (MoatType.WEAK_MOAT,)

    def test_missing_overall_archetype(self) -> None:
        payload = {k: v for k, v in AI_PAYLOAD.items() if k != "overallArchetype"}
        assert parse_ai_response(json.dumps(payload)).overall_archetype == "Mature Advertising"
