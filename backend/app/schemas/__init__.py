from .export import PACKAGE_FORMATS, ExportArtifact, ExportFormat, ExportRequest
from .generation import (
    ConnectionTestRequest,
    ConnectionTestResponse,
    GenerationData,
    GenerationRequest,
    GenerationResponse,
)
from .test_case import DocumentContext, Priority, TestCase, TestCategory

__all__ = [
    "ConnectionTestRequest",
    "ConnectionTestResponse",
    "DocumentContext",
    "ExportArtifact",
    "ExportFormat",
    "ExportRequest",
    "GenerationData",
    "GenerationRequest",
    "GenerationResponse",
    "PACKAGE_FORMATS",
    "Priority",
    "TestCase",
    "TestCategory",
]
