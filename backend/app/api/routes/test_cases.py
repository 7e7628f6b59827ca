from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from ...core.errors import LLMServiceError
from ...core.settings import Settings, get_settings
from ...schemas import (
    ConnectionTestRequest,
    ConnectionTestResponse,
    ExportFormat,
    GenerationData,
    GenerationRequest,
    GenerationResponse,
)
from ...services.converters import cases_to_records
from ...services.documents import extract_upload_text
from ...services.exporter import build_export_package
from ...services.generator import ClientFactory, TestCaseGenerator
from ...utils.json import load_string_list
from ..dependencies import get_client_factory, get_generator

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_api_key(api_key: str, settings: Settings) -> str:
    api_key = api_key.strip()
    if not api_key:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="groqApiKey is required")
    if not api_key.startswith(settings.api_key_prefix):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"groqApiKey must start with '{settings.api_key_prefix}'",
        )
    return api_key


@router.post("/test-connection", response_model=ConnectionTestResponse)
async def check_connection(
    payload: ConnectionTestRequest,
    settings: Settings = Depends(get_settings),
    client_factory: ClientFactory = Depends(get_client_factory),
):
    api_key = _check_api_key(payload.api_key, settings)
    try:
        message = await client_factory(api_key).test_connection()
    except LLMServiceError as exc:
        logger.error("Connection test failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ConnectionTestResponse(message=message)


@router.post("/generate", response_model=GenerationResponse)
async def generate_test_cases(
    feature_name: str = Form(..., alias="featureName"),
    confluence_content: str = Form("", alias="confluenceContent"),
    jira_description: str = Form("", alias="jiraDescription"),
    test_types: str = Form(..., alias="testTypes"),
    test_count: int = Form(5, alias="testCount"),
    api_key: str = Form(..., alias="groqApiKey"),
    prfaq_file: Optional[UploadFile] = File(None, alias="prfaqFile"),
    settings: Settings = Depends(get_settings),
    generator: TestCaseGenerator = Depends(get_generator),
):
    feature_name = feature_name.strip()
    if not 1 <= len(feature_name) <= 100:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="featureName must be between 1 and 100 characters",
        )
    if not 1 <= test_count <= settings.max_test_count:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"testCount must be between 1 and {settings.max_test_count}",
        )
    try:
        categories = load_string_list(test_types)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"testTypes: {exc}"
        ) from exc
    if not categories:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Select at least one test type"
        )
    api_key = _check_api_key(api_key, settings)

    document_text = ""
    if prfaq_file is not None and prfaq_file.filename:
        document_text = await extract_upload_text(prfaq_file, settings.max_upload_bytes)

    request = GenerationRequest(
        feature_name=feature_name,
        confluence_content=confluence_content,
        jira_description=jira_description,
        document_text=document_text,
        test_types=tuple(categories),
        test_count=test_count,
        api_key=api_key,
    )
    test_cases = await generator.generate(request)
    exports = build_export_package(test_cases, feature_name)

    logger.info("Successfully generated %s test cases", len(test_cases))
    return GenerationResponse(
        data=GenerationData(
            test_cases=cases_to_records(test_cases),
            csv_data=exports[ExportFormat.XRAY.value].content,
            count=len(test_cases),
            exports=exports,
        )
    )


__all__ = ["router"]
