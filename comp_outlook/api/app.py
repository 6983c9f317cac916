# comp_outlook/api/app.py
"""
FastAPI application factory.

Run with uvicorn's factory mode, e.g.
    uvicorn --factory comp_outlook.api.app:create_default_app
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from comp_outlook import __version__
from comp_outlook.api.repository import InMemoryJobRepository, JobRepository
from comp_outlook.api.routes import api_router
from comp_outlook.config.loaders import load_engine_config
from comp_outlook.config.models import EngineConfig
from comp_outlook.exceptions import MissingUserIdError
from comp_outlook.projections.client import EnrichmentClient

logger = logging.getLogger(__name__)

JOBS_FILE_ENV = "COMP_OUTLOOK_JOBS_FILE"
CONFIG_FILE_ENV = "COMP_OUTLOOK_CONFIG"


def create_app(
    repository: JobRepository,
    client: Optional[EnrichmentClient] = None,
    config: Optional[EngineConfig] = None,
) -> FastAPI:
    """
    Build the API around an explicit repository, enrichment client and config.

    With ``client=None`` career projections always use the deterministic
    fallback.
    """
    app = FastAPI(
        title="comp-outlook",
        description="Compensation projection and salary analytics API",
        version=__version__,
    )
    app.state.repository = repository
    app.state.client = client
    app.state.config = config

    @app.exception_handler(MissingUserIdError)
    async def missing_user_id_handler(request: Request, exc: MissingUserIdError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy", "enrichment": "configured" if app.state.client else "fallback"}

    logger.info(f"API created (enrichment {'enabled' if client else 'disabled'})")
    return app


def create_default_app() -> FastAPI:
    """App backed by a JSON jobs file and the environment's configuration."""
    config = load_engine_config(os.environ.get(CONFIG_FILE_ENV))
    jobs_file = os.environ.get(JOBS_FILE_ENV)
    repository = InMemoryJobRepository.from_json(jobs_file) if jobs_file else InMemoryJobRepository()
    return create_app(repository, EnrichmentClient.from_settings(config.enrichment), config)
