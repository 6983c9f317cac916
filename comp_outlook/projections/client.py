# comp_outlook/projections/client.py
"""
Chat-completion client used for career projection enrichment.

The service is OpenAI-compatible, so the ``openai`` library is used with a
configurable ``base_url``. Clients are created explicitly and handed to the
adapter; nothing here is cached at module level.
"""

import json
import logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI

from comp_outlook.config.models import EnrichmentSettings
from comp_outlook.exceptions import EnrichmentError

logger = logging.getLogger(__name__)


def extract_json(text: Optional[str]) -> Any:
    """
    Parse JSON from a model response.
    Handles responses wrapped in markdown code fences.
    """
    if not text:
        raise EnrichmentError("Empty response from enrichment service")
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    try:
        return json.loads(text.strip())
    except json.JSONDecodeError as e:
        raise EnrichmentError(f"Enrichment response is not valid JSON: {e}") from e


class EnrichmentClient:
    """
    Thin async wrapper over an OpenAI-compatible chat completion API.

    Args:
        settings: model name, sampling and transport settings.
        api_key: overrides the key read from ``settings.api_key_env``.
        openai_client: a preconfigured ``AsyncOpenAI`` (or compatible) object.
    """

    def __init__(
        self,
        settings: EnrichmentSettings,
        api_key: Optional[str] = None,
        openai_client: Optional[Any] = None,
    ):
        self.settings = settings
        if openai_client is None:
            kwargs: Dict[str, Any] = {"api_key": api_key or settings.api_key}
            if settings.base_url:
                kwargs["base_url"] = settings.base_url
            if settings.timeout_seconds is not None:
                kwargs["timeout"] = settings.timeout_seconds
            openai_client = AsyncOpenAI(**kwargs)
        self.client = openai_client

    @classmethod
    def from_settings(cls, settings: EnrichmentSettings) -> Optional["EnrichmentClient"]:
        """
        Build a client, or return None when enrichment is disabled, no API key
        is configured, or construction fails.
        """
        if not settings.enabled:
            logger.info("Enrichment disabled in configuration")
            return None
        api_key = settings.api_key
        if not api_key:
            logger.info(f"Enrichment not configured: {settings.api_key_env} is not set")
            return None
        try:
            return cls(settings, api_key=api_key)
        except Exception as e:
            logger.warning(f"Enrichment client initialization failed: {e}")
            return None

    async def complete_json(self, system_prompt: str, user_content: str) -> Any:
        """One chat completion request; returns the parsed JSON payload."""
        response = await self.client.chat.completions.create(
            model=self.settings.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
            top_p=self.settings.top_p,
            response_format={"type": "json_object"},
        )
        if not response.choices:
            raise EnrichmentError("Enrichment response has no choices")
        return extract_json(response.choices[0].message.content)

    async def aclose(self) -> None:
        close = getattr(self.client, "close", None)
        if close is not None:
            await close()
