# comp_outlook/projections/enrichment.py
"""
AI enrichment of career projections.

``enrich`` asks an OpenAI-compatible chat model for raise/growth assumptions,
extra milestones and a narrative, merges them with the user's inputs and runs
the deterministic orchestrator on the result. Every failure on the way
(no client, bad response, rate limit, network error) yields the plain
deterministic projection instead; the caller always gets a complete
``ProjectionResult`` of the same shape.

Precedence for each percentage:
    explicit user value  >  AI value (clamped)  >  normalized user default
"""

import dataclasses
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from openai import RateLimitError
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from comp_outlook.config.loaders import get_engine_config
from comp_outlook.config.models import EngineConfig
from comp_outlook.exceptions import EnrichmentError
from comp_outlook.projections.client import EnrichmentClient
from comp_outlook.projections.milestones import normalize_milestones
from comp_outlook.projections.orchestrator import (
    ProjectionResult,
    build_career_projection,
    raw_milestones,
    resolve_starting_comp,
)
from comp_outlook.projections.scenarios import (
    BENEFITS_GROWTH_PCT,
    BONUS_GROWTH_PCT,
    CONSERVATIVE_PCT,
    EQUITY_GROWTH_PCT,
    EXPECTED_PCT,
    OPTIMISTIC_PCT,
    RAISE_SCENARIOS,
    normalize_scenario_inputs,
)
from comp_outlook.schema.columns import SOURCE_AI
from comp_outlook.schema.records import normalize_jobs
from comp_outlook.utils.numeric import safe_pct

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a compensation and career progression analyst.\n"
    "OUTPUT FORMAT:\n"
    "- Output a single JSON object only (no markdown, no prose outside JSON).\n"
    "- Keys: assumptions {conservativeAnnualRaisePct, expectedAnnualRaisePct, "
    "optimisticAnnualRaisePct, bonusGrowthPct, equityGrowthPct, benefitsGrowthPct, rationale}, "
    "aiSuggestedMilestones [{year, title, salaryBumpPct, bonusBumpPct, equityBumpPct, "
    "benefitsBumpPct, note}], analysisSummary, recommendation {bestJobId, reasoning}.\n"
    "\n"
    "GOALS:\n"
    "- Choose realistic raise assumptions for conservative/expected/optimistic scenarios.\n"
    "- Consider the job details and the user's goals.\n"
    "- Suggest optional milestones (promotions/title changes) with timeline impacts.\n"
    "- Provide a concise recommendation narrative focusing on tradeoffs.\n"
    "\n"
    "CONSTRAINTS:\n"
    "- Do not invent company-specific policies; if unknown, use reasonable assumptions and state rationale.\n"
    "- Keep numbers plausible (typical annual raises 0-8%, promotion bumps 5-25% depending on seniority).\n"
    "- Use USD amounts and percentages.\n"
)

TASK_PROMPT = (
    "TASK:\n"
    "1) Provide raise assumptions for conservative/expected/optimistic scenarios "
    "(annual raise % for base salary).\n"
    "2) Provide bonus/equity/benefits growth % assumptions (annual).\n"
    "3) Suggest optional additional milestones (promotions/title changes) that are "
    "plausible given the titles.\n"
    "4) Provide an analysis summary and recommendation by jobId.\n"
    "IMPORTANT: If the user provided scenario raise %, use them unless they are clearly invalid.\n"
)

_RATE_LIMIT_PATTERN = re.compile(r"rate|quota|exceed", re.IGNORECASE)


class AiAssumptions(BaseModel):
    """Values are kept raw; coercion happens in the merge step."""

    model_config = ConfigDict(extra="ignore")

    conservativeAnnualRaisePct: Any = None
    expectedAnnualRaisePct: Any = None
    optimisticAnnualRaisePct: Any = None
    bonusGrowthPct: Any = None
    equityGrowthPct: Any = None
    benefitsGrowthPct: Any = None
    rationale: Any = None


class AiProjectionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    assumptions: AiAssumptions = Field(default_factory=AiAssumptions)
    aiSuggestedMilestones: Optional[List[Any]] = None
    analysisSummary: Any = None
    recommendation: Any = None

    @model_validator(mode='before')
    @classmethod
    def drop_wrong_shaped_parts(cls, data: Any) -> Any:
        """A non-object ``assumptions`` or non-list milestone list counts as absent."""
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        if not isinstance(data.get("assumptions"), Mapping):
            data["assumptions"] = {}
        if not isinstance(data.get("aiSuggestedMilestones"), list):
            data["aiSuggestedMilestones"] = None
        return data


@dataclass(frozen=True)
class EnrichedProjection:
    result: ProjectionResult


@dataclass(frozen=True)
class FallbackProjection:
    result: ProjectionResult
    reason: str = ""


EnrichmentOutcome = Union[EnrichedProjection, FallbackProjection]


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def build_jobs_context(jobs: Iterable[Any], inputs: Mapping) -> List[Dict[str, Any]]:
    """Job facts plus resolved starting compensation, as sent to the model."""
    starting_by_id = inputs.get("startingCompByJobId")
    starting_by_id = starting_by_id if isinstance(starting_by_id, Mapping) else {}
    context = []
    for job in normalize_jobs(jobs):
        start = resolve_starting_comp(job, starting_by_id.get(job.job_id))
        context.append(
            {
                "jobId": job.job_id,
                "company": job.company,
                "jobTitle": job.job_title,
                "location": job.location,
                "workMode": job.work_mode,
                "starting": start.to_dict(),
            }
        )
    return context


def build_user_prompt(jobs: Iterable[Any], inputs: Mapping, config: EngineConfig) -> str:
    user_scenario = normalize_scenario_inputs(inputs, config)
    user_milestones = normalize_milestones(raw_milestones(inputs), config)
    user_inputs = {
        "userProvidedRaiseScenariosPct": user_scenario.to_inputs(),
        "userProvidedMilestones": [m.to_dict() for m in user_milestones],
        "careerGoals": _text(inputs.get("careerGoals")),
        "salaryGoals": _text(inputs.get("salaryGoals")),
        "notes": _text(inputs.get("notes") or inputs.get("nonFinancialGoals")),
    }
    return (
        "=== JOB OFFERS (with starting compensation) ===\n"
        f"{json.dumps(build_jobs_context(jobs, inputs), indent=2)}\n\n"
        "=== USER INPUTS ===\n"
        f"{json.dumps(user_inputs, indent=2)}\n\n"
        f"{TASK_PROMPT}"
    )


def parse_response(payload: Any) -> AiProjectionResponse:
    if not isinstance(payload, Mapping):
        raise EnrichmentError(f"Expected a JSON object, got {type(payload).__name__}")
    try:
        return AiProjectionResponse.model_validate(dict(payload))
    except ValidationError as e:
        raise EnrichmentError(f"Unexpected enrichment response shape: {e}") from e


def merge_inputs(
    inputs: Mapping,
    ai: AiAssumptions,
    ai_milestones: Any,
    config: EngineConfig,
) -> Dict[str, Any]:
    """
    Raw projection inputs with AI values filled in wherever the user left a
    percentage unset, and AI milestones appended after the user's.
    """
    rules = config.scenarios
    user_scenario = normalize_scenario_inputs(inputs, config)
    raw_rs = inputs.get(RAISE_SCENARIOS)
    raw_rs = raw_rs if isinstance(raw_rs, Mapping) else {}

    def pick_raise(key: str, ai_value: Any, user_default: float) -> Any:
        explicit = raw_rs.get(key)
        if explicit is not None:
            return explicit
        return safe_pct(ai_value, user_default, rules.raise_min_pct, rules.raise_max_pct)

    def pick_growth(key: str, ai_value: Any, user_default: float) -> Any:
        explicit = inputs.get(key)
        if explicit is not None:
            return explicit
        return safe_pct(ai_value, user_default, rules.growth_min_pct, rules.growth_max_pct)

    user_milestones = normalize_milestones(raw_milestones(inputs), config)
    suggested = normalize_milestones(ai_milestones, config)
    combined = (user_milestones + suggested)[: config.milestones.max_combined]

    merged = dict(inputs)
    merged[RAISE_SCENARIOS] = {
        CONSERVATIVE_PCT: pick_raise(
            CONSERVATIVE_PCT, ai.conservativeAnnualRaisePct, user_scenario.conservative_pct
        ),
        EXPECTED_PCT: pick_raise(EXPECTED_PCT, ai.expectedAnnualRaisePct, user_scenario.expected_pct),
        OPTIMISTIC_PCT: pick_raise(
            OPTIMISTIC_PCT, ai.optimisticAnnualRaisePct, user_scenario.optimistic_pct
        ),
    }
    merged[BONUS_GROWTH_PCT] = pick_growth(
        BONUS_GROWTH_PCT, ai.bonusGrowthPct, user_scenario.bonus_growth_pct
    )
    merged[EQUITY_GROWTH_PCT] = pick_growth(
        EQUITY_GROWTH_PCT, ai.equityGrowthPct, user_scenario.equity_growth_pct
    )
    merged[BENEFITS_GROWTH_PCT] = pick_growth(
        BENEFITS_GROWTH_PCT, ai.benefitsGrowthPct, user_scenario.benefits_growth_pct
    )
    merged["milestones"] = combined
    merged.pop("careerMilestones", None)
    return merged


def _is_rate_limited(err: Exception) -> bool:
    if isinstance(err, RateLimitError):
        return True
    status = getattr(err, "status_code", None) or getattr(err, "status", None)
    return status == 429 or bool(_RATE_LIMIT_PATTERN.search(str(err)))


def _fallback(jobs: Any, inputs: Mapping, config: EngineConfig, reason: str) -> FallbackProjection:
    logger.warning(f"Career projection enrichment unavailable, using fallback: {reason}")
    return FallbackProjection(
        result=build_career_projection(jobs, inputs, config=config),
        reason=reason,
    )


async def enrich(
    jobs: Any,
    inputs: Optional[Mapping] = None,
    client: Optional[EnrichmentClient] = None,
    config: Optional[EngineConfig] = None,
) -> EnrichmentOutcome:
    """
    Run one enrichment request and merge it into a projection.

    Never raises for enrichment problems; returns ``FallbackProjection`` with
    the reason instead. Cancellation of the awaiting task still propagates.
    """
    config = config or get_engine_config()
    inputs = inputs if isinstance(inputs, Mapping) else {}

    if client is None:
        return _fallback(jobs, inputs, config, "enrichment client not configured")

    try:
        payload = await client.complete_json(SYSTEM_PROMPT, build_user_prompt(jobs, inputs, config))
        parsed = parse_response(payload)
    except Exception as e:
        if _is_rate_limited(e):
            return _fallback(jobs, inputs, config, f"rate limited ({e})")
        return _fallback(jobs, inputs, config, f"{type(e).__name__}: {e}")

    merged = merge_inputs(inputs, parsed.assumptions, parsed.aiSuggestedMilestones, config)
    computed = build_career_projection(
        jobs,
        merged,
        source=SOURCE_AI,
        rationale=_text(parsed.assumptions.rationale),
        config=config,
    )
    summary = _text(parsed.analysisSummary) or computed.analysis_summary
    recommendation = parsed.recommendation if isinstance(parsed.recommendation, Mapping) else None

    result = dataclasses.replace(
        computed,
        # Combined order (user first, then AI), not the year-sorted order
        milestones=tuple(merged["milestones"]),
        analysis_summary=summary,
        recommendation=dict(recommendation) if recommendation is not None else None,
    )
    logger.info(
        f"Enriched career projection for {len(result.jobs)} job(s) "
        f"with {len(result.milestones)} milestone(s)"
    )
    return EnrichedProjection(result=result)


async def generate_career_projection(
    jobs: Any,
    inputs: Optional[Mapping] = None,
    client: Optional[EnrichmentClient] = None,
    config: Optional[EngineConfig] = None,
) -> ProjectionResult:
    """Career projection for ``jobs``; AI-enriched when ``client`` succeeds."""
    outcome = await enrich(jobs, inputs, client=client, config=config)
    return outcome.result
