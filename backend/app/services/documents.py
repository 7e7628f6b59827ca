from __future__ import annotations

import asyncio
import logging
import os
import tempfile
import zipfile
from typing import Callable, Dict, Optional

import docx
from docx.opc.exceptions import PackageNotFoundError
from fastapi import UploadFile
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from ..core.errors import DocumentError, UnsupportedDocumentError

logger = logging.getLogger(__name__)

TEXT_MIME = "text/plain"
PDF_MIME = "application/pdf"
WORD_MIMES = (
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)
ALLOWED_MIME_TYPES = (TEXT_MIME, PDF_MIME) + WORD_MIMES


def _read_text(path: str) -> str:
    with open(path, "rb") as handle:
        return handle.read().decode("utf-8", errors="replace")


def _read_pdf(path: str) -> str:
    reader = PdfReader(path)
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _read_word(path: str) -> str:
    document = docx.Document(path)
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


EXTRACTORS: Dict[str, Callable[[str], str]] = {
    TEXT_MIME: _read_text,
    PDF_MIME: _read_pdf,
    **{mime: _read_word for mime in WORD_MIMES},
}


def _format_size(num_bytes: int) -> str:
    for unit, factor in (("MB", 1024 * 1024), ("KB", 1024)):
        if num_bytes >= factor:
            return f"{num_bytes // factor}{unit}"
    return f"{num_bytes} bytes"


def _media_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def extract_file_text(path: str, content_type: Optional[str]) -> str:
    """Extract plain text from a document on disk according to its MIME type."""
    media_type = _media_type(content_type)
    extractor = EXTRACTORS.get(media_type)
    if extractor is None:
        raise UnsupportedDocumentError(f"Unsupported file type: {media_type or 'unknown'}")
    try:
        return extractor(path)
    except (
        PdfReadError,
        PackageNotFoundError,
        zipfile.BadZipFile,
        ValueError,
        KeyError,
        OSError,
    ) as exc:
        raise DocumentError(f"Unable to read uploaded document: {exc}") from exc


def _spool_and_extract(data: bytes, suffix: str, media_type: str) -> str:
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as temp_file:
        temp_file.write(data)
        temp_path = temp_file.name

    try:
        return extract_file_text(temp_path, media_type)
    finally:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass


async def extract_upload_text(upload: UploadFile, max_bytes: int) -> str:
    """Spool an upload to a temporary file, extract its text and remove the file."""
    media_type = _media_type(upload.content_type)
    if media_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedDocumentError(f"Unsupported file type: {media_type or 'unknown'}")

    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise DocumentError(f"File too large. Maximum size is {_format_size(max_bytes)}.")

    suffix = os.path.splitext(upload.filename or "")[1]
    try:
        text = await asyncio.to_thread(_spool_and_extract, data, suffix, media_type)
    except DocumentError:
        logger.warning("Failed to extract text from upload %s", upload.filename)
        raise

    logger.info("Extracted %s characters from %s", len(text), upload.filename)
    return text


__all__ = ["ALLOWED_MIME_TYPES", "extract_file_text", "extract_upload_text"]
