# comp_outlook/api/routes.py
"""
HTTP routes.

GET  /salary-analytics             - analytics report for the current user
POST /offers/compare               - side-by-side comparison of offer jobs
POST /offers/career-projection     - multi-year projection across offer jobs

Errors are returned as ``{"error": <message>}`` with stable messages.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from comp_outlook.analytics.offers import build_comparison
from comp_outlook.analytics.report import build_salary_analytics
from comp_outlook.exceptions import MissingUserIdError
from comp_outlook.projections.enrichment import generate_career_projection

logger = logging.getLogger(__name__)

DEV_USER_HEADER = "x-dev-user-id"

ANALYTICS_FAILED = "Failed to load salary analytics"
UNAUTHORIZED = "Unauthorized"
TOO_FEW_JOB_IDS = "Provide at least two offer jobIds to project."
TOO_FEW_JOBS = "Could not load at least two offer jobs for projection."
PROJECTION_FAILED = "Failed to generate career projection"
TOO_FEW_COMPARE_IDS = "Provide at least two offer jobIds to compare."
TOO_FEW_COMPARE_JOBS = "Could not load at least two offer jobs for comparison."
COMPARISON_FAILED = "Failed to compare offers"

MIN_OFFER_JOBS = 2


class CareerProjectionRequest(BaseModel):
    # Validated in the handler so bad shapes get the stable 400 messages
    jobIds: Any = None
    inputs: Any = None


class OfferComparisonRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jobIds: Any = None
    baselineColIndex: Any = None
    colIndexByJobId: Any = None
    scenarioByJobId: Any = None
    ratingsByJobId: Any = None
    weights: Any = None


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def get_user_id(request: Request) -> Optional[str]:
    """Authenticated user id from upstream auth, else the dev header."""
    user_id = getattr(request.state, "user_id", None) or request.headers.get(DEV_USER_HEADER)
    return str(user_id) if user_id else None


def require_user_id(request: Request) -> str:
    user_id = get_user_id(request)
    if not user_id:
        raise MissingUserIdError()
    return user_id


def get_repository(request: Request):
    return request.app.state.repository


analytics_router = APIRouter(prefix="/salary-analytics", tags=["Salary Analytics"])
offers_router = APIRouter(prefix="/offers", tags=["Offers"])


@analytics_router.get("")
def get_salary_analytics(
    request: Request,
    user_id: str = Depends(require_user_id),
    repository=Depends(get_repository),
):
    """Salary summary, progression, negotiation stats, market positioning and recommendations."""
    try:
        jobs = repository.find_jobs(user_id)
        report = build_salary_analytics(jobs, config=request.app.state.config)
    except Exception:
        logger.exception(f"Salary analytics failed for user {user_id}")
        return error_response(500, ANALYTICS_FAILED)
    return jsonable_encoder(report.to_dict())


@offers_router.post("/compare")
def compare_offers(
    body: OfferComparisonRequest,
    request: Request,
    repository=Depends(get_repository),
):
    """Score at least two offer jobs side by side (COL-adjusted comp, ratings, negotiation hints)."""
    user_id = get_user_id(request)
    if not user_id:
        return error_response(401, UNAUTHORIZED)

    job_ids = body.jobIds if body.jobIds is not None else []
    if not isinstance(job_ids, list) or len(job_ids) < MIN_OFFER_JOBS:
        return error_response(400, TOO_FEW_COMPARE_IDS)

    try:
        jobs = repository.find_offer_jobs(user_id, [str(i) for i in job_ids])
        if len(jobs) < MIN_OFFER_JOBS:
            return error_response(400, TOO_FEW_COMPARE_JOBS)
        comparison = build_comparison(jobs, body.model_dump(), config=request.app.state.config)
    except Exception:
        logger.exception(f"Offer comparison failed for user {user_id}")
        return error_response(500, COMPARISON_FAILED)
    return jsonable_encoder(comparison.to_dict())


@offers_router.post("/career-projection")
async def create_career_projection(
    body: CareerProjectionRequest,
    request: Request,
    repository=Depends(get_repository),
):
    """
    Project 5- and 10-year compensation for at least two offer jobs.

    Uses AI-suggested assumptions when an enrichment client is configured,
    and the deterministic projection otherwise.
    """
    user_id = get_user_id(request)
    if not user_id:
        return error_response(401, UNAUTHORIZED)

    job_ids = body.jobIds if body.jobIds is not None else []
    if not isinstance(job_ids, list) or len(job_ids) < MIN_OFFER_JOBS:
        return error_response(400, TOO_FEW_JOB_IDS)

    try:
        jobs = await run_in_threadpool(repository.find_offer_jobs, user_id, [str(i) for i in job_ids])
        if len(jobs) < MIN_OFFER_JOBS:
            return error_response(400, TOO_FEW_JOBS)

        result = await generate_career_projection(
            jobs,
            body.inputs if isinstance(body.inputs, dict) else {},
            client=request.app.state.client,
            config=request.app.state.config,
        )
    except Exception:
        logger.exception(f"Career projection failed for user {user_id}")
        return error_response(500, PROJECTION_FAILED)
    return {"data": jsonable_encoder(result.to_dict())}


api_router = APIRouter()
api_router.include_router(analytics_router)
api_router.include_router(offers_router)
