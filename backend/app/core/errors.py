from __future__ import annotations

from typing import Optional


class TestCaseForgeError(Exception):
    """Base class for errors raised by the test case services."""

    __test__ = False


class LLMServiceError(TestCaseForgeError):
    """The language-model endpoint could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LLMResponseError(LLMServiceError):
    """The language model answered, but not with usable test cases."""


class DocumentError(TestCaseForgeError):
    """An uploaded document could not be turned into text."""


class UnsupportedDocumentError(DocumentError):
    pass


__all__ = [
    "DocumentError",
    "LLMResponseError",
    "LLMServiceError",
    "TestCaseForgeError",
    "UnsupportedDocumentError",
]
