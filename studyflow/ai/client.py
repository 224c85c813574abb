from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

import httpx
import openai
from openai import OpenAI

from studyflow import config
from studyflow.errors import GenerationError

logger = logging.getLogger(__name__)

_client: OpenAI | None = None


class JSONBackend(Protocol):
    def complete_json(self, prompt: str, schema_name: str, schema: Dict[str, Any]) -> str:
        """Send ``prompt`` and return the raw JSON text the model produced."""
        ...


def get_client() -> OpenAI:
    """
    Lazily create and cache the OpenAI-compatible client.

    No secrets are required at import time; automatic retries are disabled so
    a failing provider surfaces immediately.
    """
    global _client
    if _client is not None:
        return _client

    if not config.AI_API_KEY.strip():
        raise GenerationError(GenerationError.NOT_CONFIGURED, "AI_API_KEY (or GEMINI_API_KEY) is not set")

    _client = OpenAI(
        base_url=config.AI_BASE_URL,
        api_key=config.AI_API_KEY,
        timeout=httpx.Timeout(config.AI_TIMEOUT_SECONDS, connect=5.0),
        max_retries=0,
    )
    return _client


class OpenAIJSONBackend:
    """Structured-output chat completions against an OpenAI-compatible API."""

    def __init__(self, client: Optional[OpenAI] = None, model: Optional[str] = None):
        self._client = client
        self.model = model or config.AI_MODEL

    def complete_json(self, prompt: str, schema_name: str, schema: Dict[str, Any]) -> str:
        client = self._client or get_client()
        logger.debug("AI: requesting %s from model=%s", schema_name, self.model)
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": schema_name, "schema": schema},
                },
            )
        except openai.OpenAIError as e:
            raise GenerationError(GenerationError.PROVIDER, f"{e.__class__.__name__}: {e}") from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
