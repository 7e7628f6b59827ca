from __future__ import annotations

from ..services.generator import ClientFactory, TestCaseGenerator
from ..services.llm import GroqClient


def get_client_factory() -> ClientFactory:
    return GroqClient


def get_generator() -> TestCaseGenerator:
    return TestCaseGenerator(client_factory=get_client_factory())
