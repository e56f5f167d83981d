"""
Chat completion client for an OpenAI-compatible endpoint (Groq by default).
"""
import json
import logging
import re
from functools import lru_cache
from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..exceptions import ExternalServiceException

# Set up logging
logger = logging.getLogger(__name__)

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def extract_json(text: Optional[str]) -> Dict[str, Any]:
    """
    Parse a JSON object out of a model reply.

    Models often wrap the object in prose or code fences, so the outermost
    ``{...}`` block is parsed when one is present.

    Raises:
        ValueError: If the reply is empty or holds no parseable object
    """
    if not text or not text.strip():
        raise ValueError("Empty completion")

    cleaned = text.strip()
    match = JSON_OBJECT_PATTERN.search(cleaned)
    candidate = match.group(0) if match else cleaned

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ValueError(f"Completion is not valid JSON: {e.msg}") from e

    if not isinstance(parsed, dict):
        raise ValueError("Completion is not a JSON object")
    return parsed


class LLMClient:
    """Thin async wrapper around a chat completions endpoint"""

    def __init__(self, api_url: str, api_key: str, model: str, temperature: float,
                 max_tokens: int, timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.transport = transport

    async def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """
        Request a single completion and return the message content.

        Raises:
            ExternalServiceException: On transport errors or non-2xx responses
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"LLM API returned {e.response.status_code}: {e.response.text[:500]}")
            raise ExternalServiceException("Failed to generate form data") from e
        except httpx.HTTPError as e:
            logger.error(f"LLM API request failed: {str(e)}")
            raise ExternalServiceException("Failed to generate form data") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"LLM API returned a non-JSON body: {response.text[:500]}")
            raise ExternalServiceException("Failed to generate form data") from e

        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            logger.error(f"Unexpected LLM response shape: {str(data)[:500]}")
            return ""


@lru_cache()
def get_llm_client() -> LLMClient:
    return LLMClient(
        api_url=settings.llm_api_url,
        api_key=settings.groq_api_key,
        model=settings.llm_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout_seconds
    )
