import asyncio
import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from comp_outlook.exceptions import EnrichmentError
from comp_outlook.projections.client import EnrichmentClient, extract_json
from comp_outlook.projections.enrichment import (
    EnrichedProjection,
    FallbackProjection,
    enrich,
    generate_career_projection,
)
from comp_outlook.projections.orchestrator import ProjectionResult, build_career_projection


def _fake_client(payload=None, error=None):
    client = MagicMock()
    if error is not None:
        client.complete_json = AsyncMock(side_effect=error)
    else:
        client.complete_json = AsyncMock(return_value=payload)
    return client


def _ai_payload(**overrides):
    payload = {
        "assumptions": {
            "conservativeAnnualRaisePct": 1,
            "expectedAnnualRaisePct": 4,
            "optimisticAnnualRaisePct": 50,
            "bonusGrowthPct": "abc",
            "equityGrowthPct": 2,
            "rationale": "  Based on market data.  ",
        },
        "aiSuggestedMilestones": [{"year": 3, "title": "Staff Engineer", "salaryBumpPct": 15}],
        "analysisSummary": "  Globex offers the stronger trajectory.  ",
        "recommendation": {"bestJobId": "offerB", "reasoning": "Higher base"},
    }
    payload.update(overrides)
    return payload


def test_no_client_falls_back(offer_jobs, engine_config):
    outcome = asyncio.run(enrich(offer_jobs, {}, client=None, config=engine_config))
    assert isinstance(outcome, FallbackProjection)
    assert outcome.result.assumptions.source == "fallback"


def test_call_failure_falls_back_with_identical_shape(offer_jobs, engine_config, caplog):
    client = _fake_client(error=ConnectionError("connection reset"))
    inputs = {"raiseScenarios": {"expectedPct": 4}}

    with caplog.at_level(logging.WARNING, logger="comp_outlook.projections.enrichment"):
        outcome = asyncio.run(enrich(offer_jobs, inputs, client=client, config=engine_config))

    assert isinstance(outcome, FallbackProjection)
    assert outcome.result.assumptions.source == "fallback"
    assert outcome.result == build_career_projection(offer_jobs, inputs, config=engine_config)
    assert "connection reset" in caplog.text
    client.complete_json.assert_awaited_once()


def test_rate_limit_falls_back_without_retry(offer_jobs, engine_config, caplog):
    client = _fake_client(error=RuntimeError("429: quota exceeded for this project"))

    with caplog.at_level(logging.WARNING, logger="comp_outlook.projections.enrichment"):
        outcome = asyncio.run(enrich(offer_jobs, {}, client=client, config=engine_config))

    assert isinstance(outcome, FallbackProjection)
    assert "rate limited" in outcome.reason
    assert client.complete_json.await_count == 1


@pytest.mark.parametrize(
    "payload",
    [["not", "an", "object"], "plain text", 42, None],
)
def test_non_object_response_falls_back(offer_jobs, engine_config, payload):
    outcome = asyncio.run(enrich(offer_jobs, {}, client=_fake_client(payload), config=engine_config))
    assert isinstance(outcome, FallbackProjection)
    assert outcome.result.to_dict().keys() == build_career_projection(
        offer_jobs, {}, config=engine_config
    ).to_dict().keys()


@pytest.mark.parametrize(
    "payload",
    [
        {"assumptions": None},
        {"assumptions": "should be an object"},
        {"aiSuggestedMilestones": {"year": 2}},
        {"assumptions": [1, 2], "aiSuggestedMilestones": "Staff Engineer"},
    ],
)
def test_wrong_shaped_parts_are_treated_as_empty(offer_jobs, engine_config, payload):
    inputs = {"raiseScenarios": {"expectedPct": 4}, "milestones": [{"year": 2, "title": "Lead"}]}
    outcome = asyncio.run(enrich(offer_jobs, inputs, client=_fake_client(payload), config=engine_config))

    assert isinstance(outcome, EnrichedProjection)
    a = outcome.result.assumptions
    assert a.source == "ai"
    assert a.expected_annual_raise_pct == 4
    # Unset values keep the normalized user defaults
    assert a.conservative_annual_raise_pct == 2
    assert [m.title for m in outcome.result.milestones] == ["Lead"]


def test_ai_values_fill_only_unset_user_values(offer_jobs, engine_config):
    inputs = {"raiseScenarios": {"expectedPct": 6}}
    outcome = asyncio.run(
        enrich(offer_jobs, inputs, client=_fake_client(_ai_payload()), config=engine_config)
    )
    assert isinstance(outcome, EnrichedProjection)
    a = outcome.result.assumptions
    assert a.source == "ai"
    assert a.conservative_annual_raise_pct == 1
    # Explicit user value wins over the AI's 4
    assert a.expected_annual_raise_pct == 6
    # AI value clamped into [0, 20]
    assert a.optimistic_annual_raise_pct == 20
    # Unusable AI value falls back to the normalized user default
    assert a.bonus_growth_pct == 0
    assert a.equity_growth_pct == 2
    assert a.rationale == "Based on market data."


def test_ai_narrative_and_recommendation_pass_through(offer_jobs, engine_config):
    outcome = asyncio.run(
        enrich(offer_jobs, {}, client=_fake_client(_ai_payload()), config=engine_config)
    )
    result = outcome.result
    assert result.analysis_summary == "Globex offers the stronger trajectory."
    assert result.recommendation == {"bestJobId": "offerB", "reasoning": "Higher base"}


def test_blank_ai_summary_keeps_computed_summary(offer_jobs, engine_config):
    payload = _ai_payload(analysisSummary="   ", recommendation="not an object")
    outcome = asyncio.run(enrich(offer_jobs, {}, client=_fake_client(payload), config=engine_config))
    assert "Globex — Senior Engineer" in outcome.result.analysis_summary
    assert outcome.result.recommendation is None


def test_ai_milestones_appended_after_user_milestones(offer_jobs, engine_config):
    inputs = {"milestones": [{"year": 5, "title": "Lead"}]}
    outcome = asyncio.run(
        enrich(offer_jobs, inputs, client=_fake_client(_ai_payload()), config=engine_config)
    )
    result = outcome.result
    assert [m.title for m in result.milestones] == ["Lead", "Staff Engineer"]
    expected = result.jobs[0].scenario("expected").five_year
    assert expected.snapshots[3].title == "Staff Engineer"
    assert expected.snapshots[5].title == "Lead"


def test_combined_milestones_truncated_to_twenty(offer_jobs, engine_config):
    user = [{"year": 1 + i % 10, "title": f"user{i}"} for i in range(15)]
    ai = [{"year": 2, "title": f"ai{i}"} for i in range(10)]
    outcome = asyncio.run(
        enrich(
            offer_jobs,
            {"milestones": user},
            client=_fake_client(_ai_payload(aiSuggestedMilestones=ai)),
            config=engine_config,
        )
    )
    titles = [m.title for m in outcome.result.milestones]
    assert len(titles) == 20
    assert sum(t.startswith("user") for t in titles) == 15
    assert titles[15:] == ["ai0", "ai1", "ai2", "ai3", "ai4"]


def test_prompt_carries_jobs_and_goals(offer_jobs, engine_config):
    client = _fake_client(_ai_payload())
    asyncio.run(
        enrich(offer_jobs, {"careerGoals": "Become a staff engineer"}, client=client, config=engine_config)
    )
    system_prompt, user_prompt = client.complete_json.await_args.args
    assert "compensation and career progression analyst" in system_prompt
    assert "Globex" in user_prompt
    assert "Become a staff engineer" in user_prompt
    assert '"benefits": 15000.0' in user_prompt


def test_generate_career_projection_returns_result(offer_jobs, engine_config):
    result = asyncio.run(
        generate_career_projection(offer_jobs, {}, client=_fake_client(error=ValueError("boom")), config=engine_config)
    )
    assert isinstance(result, ProjectionResult)
    assert result.assumptions.source == "fallback"


def test_extract_json_handles_code_fences():
    assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert extract_json('```\n[1, 2]\n```') == [1, 2]
    assert extract_json(' {"b": 2} ') == {"b": 2}


@pytest.mark.parametrize("text", [None, "", "not json"])
def test_extract_json_rejects_bad_text(text):
    with pytest.raises(EnrichmentError):
        extract_json(text)


def test_client_complete_json_uses_chat_completions(engine_config):
    response = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content='```json\n{"ok": true}\n```'))]
    )
    openai_client = MagicMock()
    openai_client.chat.completions.create = AsyncMock(return_value=response)
    client = EnrichmentClient(engine_config.enrichment, openai_client=openai_client)

    assert asyncio.run(client.complete_json("system", "user")) == {"ok": True}
    kwargs = openai_client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == engine_config.enrichment.model
    assert kwargs["messages"][0] == {"role": "system", "content": "system"}
    assert kwargs["temperature"] == 0.4


def test_client_from_settings_requires_key(engine_config, monkeypatch):
    settings = engine_config.enrichment
    monkeypatch.delenv(settings.api_key_env, raising=False)
    assert EnrichmentClient.from_settings(settings) is None

    monkeypatch.setenv(settings.api_key_env, "sk-test")
    assert isinstance(EnrichmentClient.from_settings(settings), EnrichmentClient)

    disabled = settings.model_copy(update={"enabled": False})
    assert EnrichmentClient.from_settings(disabled) is None


def test_client_aclose_closes_underlying_client(engine_config):
    openai_client = MagicMock()
    openai_client.close = AsyncMock()
    client = EnrichmentClient(engine_config.enrichment, openai_client=openai_client)

    asyncio.run(client.aclose())

    openai_client.close.assert_awaited_once()
