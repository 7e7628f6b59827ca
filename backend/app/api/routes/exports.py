from __future__ import annotations

import logging
import re
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from ...schemas import ExportFormat, ExportRequest
from ...services.converters import coerce_test_cases
from ...services.exporter import build_export

logger = logging.getLogger(__name__)

router = APIRouter()

MEDIA_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.SUMMARY: "text/plain",
}
CSV_MEDIA_TYPE = "text/csv"

_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9._-]')


def content_disposition(filename: str) -> str:
    fallback = _UNSAFE_FILENAME_CHARS.sub("_", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.post("/export")
async def download_export(payload: ExportRequest) -> Response:
    try:
        export_format = ExportFormat(payload.format)
    except ValueError as exc:
        valid = ", ".join(member.value for member in ExportFormat)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid export format '{payload.format}'. Valid formats: {valid}",
        ) from exc

    test_cases = coerce_test_cases(payload.test_cases)
    feature_name = payload.feature_name.strip() or "test_cases"
    artifact = build_export(export_format, test_cases, feature_name)
    logger.info("Exporting %s test cases as %s", len(test_cases), export_format.value)

    return Response(
        content=artifact.content,
        media_type=MEDIA_TYPES.get(export_format, CSV_MEDIA_TYPE),
        headers={"Content-Disposition": content_disposition(artifact.filename)},
    )


__all__ = ["router"]
