from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from ..core.errors import LLMServiceError
from ..core.settings import get_settings
from ..schemas import GenerationRequest, TestCase
from .context import extract_context
from .fallback import synthesize
from .llm import GroqClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], GroqClient]
Sleep = Callable[[float], Awaitable[None]]


class TestCaseGenerator:
    """Runs one generation request: analysis, then one model call per category.

    A category whose call fails is backfilled with synthesized test cases, so
    callers always receive a complete batch. Ids are only unique per
    (category, ordinal); two categories with the same upper-cased label
    produce colliding ids.
    """

    __test__ = False

    def __init__(
        self,
        client_factory: ClientFactory = GroqClient,
        delay_seconds: Optional[float] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.client_factory = client_factory
        self.delay_seconds = (
            get_settings().category_delay_seconds if delay_seconds is None else delay_seconds
        )
        self.sleep = sleep

    async def _analyze(self, client: GroqClient, request: GenerationRequest) -> str:
        content = request.combined_content
        try:
            analysis = await client.analyze_documents(request.feature_name, content)
        except LLMServiceError as exc:
            logger.warning("Documentation analysis failed, using raw documentation: %s", exc)
            analysis = ""
        return analysis or content or f"Feature: {request.feature_name}"

    async def generate(self, request: GenerationRequest) -> List[TestCase]:
        logger.info(
            "Generating test cases for feature %r: categories=%s count=%s",
            request.feature_name,
            list(request.test_types),
            request.test_count,
        )
        client = self.client_factory(request.api_key)
        analysis = await self._analyze(client, request)
        context = extract_context(request.combined_content)

        test_cases: List[TestCase] = []
        for position, category in enumerate(request.test_types):
            if position and self.delay_seconds > 0:
                await self.sleep(self.delay_seconds)
            logger.info("Generating %s test cases...", category)
            try:
                cases = await client.generate_test_cases(
                    request.feature_name, analysis, category, request.test_count
                )
            except LLMServiceError as exc:
                logger.warning("Failed to generate %s tests, using fallback: %s", category, exc)
                cases = synthesize(request.feature_name, category, request.test_count, context)
            test_cases.extend(cases)

        logger.info("Generated %s test cases for %r", len(test_cases), request.feature_name)
        return test_cases


__all__ = ["TestCaseGenerator"]
