from __future__ import annotations

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class ExportFormat(str, Enum):
    XRAY = "xray"
    SIMPLE = "simple"
    TESTRAIL = "testrail"
    AZURE = "azure"
    JSON = "json"
    SUMMARY = "summary"
    XRAY_LEGACY = "xray_legacy"


PACKAGE_FORMATS = (
    ExportFormat.XRAY,
    ExportFormat.SIMPLE,
    ExportFormat.TESTRAIL,
    ExportFormat.AZURE,
    ExportFormat.JSON,
    ExportFormat.SUMMARY,
)


class ExportArtifact(BaseModel):
    filename: str
    content: str
    description: str


class ExportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    format: str = Field(..., min_length=1)
    test_cases: List[Any] = Field(default_factory=list, alias="testCases")
    feature_name: str = Field(default="test_cases", alias="featureName")
