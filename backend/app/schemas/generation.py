from __future__ import annotations

from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .export import ExportArtifact


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    feature_name: str = Field(..., min_length=1, max_length=100)
    confluence_content: str = ""
    jira_description: str = ""
    document_text: str = ""
    test_types: Tuple[str, ...] = Field(..., min_length=1)
    test_count: int = Field(default=5, ge=1)
    api_key: str = Field(..., min_length=1)

    @property
    def combined_content(self) -> str:
        parts = [self.document_text, self.confluence_content, self.jira_description]
        return "\n\n".join(part for part in parts if part)


class GenerationData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    test_cases: List[Dict[str, Any]] = Field(default_factory=list, alias="testCases")
    csv_data: str = Field(default="", alias="csvData")
    count: int = 0
    exports: Dict[str, ExportArtifact] = Field(default_factory=dict)


class GenerationResponse(BaseModel):
    success: bool = True
    data: GenerationData


class ConnectionTestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(..., alias="groqApiKey")


class ConnectionTestResponse(BaseModel):
    success: bool = True
    message: str
