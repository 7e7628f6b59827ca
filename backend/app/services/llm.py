from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from ..core.errors import LLMResponseError, LLMServiceError
from ..core.settings import Settings, get_settings
from ..schemas import TestCase
from ..utils.json import extract_json_array
from .converters import records_to_test_cases
from .prompts import CONNECTION_TEST_PROMPT, render_analysis_prompt, render_test_case_prompt

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return f"API Error: {response.status_code}"


def _message_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


class GroqClient:
    """Chat-completions client authenticated with the caller's API key."""

    def __init__(
        self,
        api_key: str,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.settings = settings or get_settings()
        self._transport = transport

    async def complete(self, prompt: str, max_tokens: int = 1000) -> str:
        payload = {
            "messages": [{"role": "user", "content": prompt}],
            "model": self.settings.groq_model,
            "temperature": self.settings.temperature,
            "max_tokens": max_tokens,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(self.settings.groq_api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise LLMServiceError(f"Unable to reach model endpoint: {exc}") from exc

        if not response.is_success:
            raise LLMServiceError(_error_message(response), status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMResponseError("Model endpoint returned a non-JSON body") from exc
        return _message_content(data)

    async def test_connection(self) -> str:
        return await self.complete(CONNECTION_TEST_PROMPT, max_tokens=50)

    async def analyze_documents(self, feature_name: str, content: str) -> str:
        return await self.complete(render_analysis_prompt(feature_name, content), max_tokens=1500)

    async def generate_test_cases(
        self, feature_name: str, analysis: str, category: str, count: int
    ) -> List[TestCase]:
        reply = await self.complete(
            render_test_case_prompt(feature_name, analysis, category, count), max_tokens=2000
        )
        try:
            cases = records_to_test_cases(extract_json_array(reply))
        except ValueError as exc:
            logger.debug("Unparseable %s reply: %.500s", category, reply)
            raise LLMResponseError(f"Could not parse {category} test cases: {exc}") from exc
        if not cases:
            raise LLMResponseError(f"Model returned no {category} test cases")
        return cases


__all__ = ["GroqClient"]
