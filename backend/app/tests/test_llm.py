import asyncio
import json

import httpx
import pytest

from backend.app.core.errors import LLMResponseError, LLMServiceError
from backend.app.core.settings import Settings
from backend.app.services.llm import GroqClient

SETTINGS = Settings(groq_api_url="https://llm.example.test/v1/chat/completions")


def completion(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def make_client(handler) -> GroqClient:
    return GroqClient("gsk_test", settings=SETTINGS, transport=httpx.MockTransport(handler))


def test_complete_sends_bearer_token_and_model() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return completion("hello")

    reply = asyncio.run(make_client(handler).complete("ping", max_tokens=42))

    assert reply == "hello"
    assert seen["auth"] == "Bearer gsk_test"
    assert seen["url"] == SETTINGS.groq_api_url
    assert seen["body"]["model"] == SETTINGS.groq_model
    assert seen["body"]["max_tokens"] == 42
    assert seen["body"]["messages"] == [{"role": "user", "content": "ping"}]


def test_error_status_uses_upstream_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Invalid API Key"}})

    with pytest.raises(LLMServiceError) as excinfo:
        asyncio.run(make_client(handler).complete("ping"))

    assert str(excinfo.value) == "Invalid API Key"
    assert excinfo.value.status_code == 401


def test_error_status_without_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(LLMServiceError, match="API Error: 503"):
        asyncio.run(make_client(handler).complete("ping"))


def test_transport_failure_is_wrapped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LLMServiceError, match="Unable to reach model endpoint"):
        asyncio.run(make_client(handler).complete("ping"))


def test_missing_choices_yield_empty_reply() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": []})

    assert asyncio.run(make_client(handler).complete("ping")) == ""


def test_generate_test_cases_extracts_array_from_prose() -> None:
    records = [
        {
            "id": "TC_1",
            "summary": "Login works",
            "priority": "High",
            "steps": ["Open page", "2. Sign in"],
            "expectedResult": "Dashboard shown",
        }
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["messages"][0]["content"]
        assert prompt.startswith('Generate 1 Functional test cases for "Login"')
        return completion("Sure! Here they are:\n" + json.dumps(records) + "\nThanks")

    cases = asyncio.run(make_client(handler).generate_test_cases("Login", "analysis", "Functional", 1))

    assert len(cases) == 1
    assert cases[0].id == "TC_1"
    assert cases[0].steps == "1. Open page\n2. Sign in"
    assert cases[0].expected_result == "Dashboard shown"


def test_generate_test_cases_rejects_reply_without_array() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return completion("I cannot help with that.")

    with pytest.raises(LLMResponseError):
        asyncio.run(make_client(handler).generate_test_cases("Login", "analysis", "Functional", 1))


def test_generate_test_cases_rejects_empty_array() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return completion("[]")

    with pytest.raises(LLMResponseError):
        asyncio.run(make_client(handler).generate_test_cases("Login", "analysis", "Functional", 1))


def test_generate_test_cases_rejects_non_object_items() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return completion('["just a string"]')

    with pytest.raises(LLMResponseError):
        asyncio.run(make_client(handler).generate_test_cases("Login", "analysis", "Functional", 1))
