import asyncio
import io
import os
import time

import docx
import pytest
from starlette.datastructures import Headers, UploadFile

from backend.app.core.errors import DocumentError, UnsupportedDocumentError
from backend.app.services import documents
from backend.app.services.documents import extract_file_text, extract_upload_text


def make_upload(data: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def test_plain_text_upload() -> None:
    upload = make_upload("Login form with validation – ok".encode("utf-8"), "notes.txt", "text/plain")

    text = asyncio.run(extract_upload_text(upload, max_bytes=1024))

    assert text == "Login form with validation – ok"


def test_word_document(tmp_path) -> None:
    path = tmp_path / "feature.docx"
    document = docx.Document()
    document.add_paragraph("Users authenticate with a password.")
    document.add_paragraph("Orders are saved to the database.")
    document.save(str(path))

    text = extract_file_text(
        str(path), "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )

    assert text == "Users authenticate with a password.\nOrders are saved to the database."


def test_corrupt_word_document_raises_document_error(tmp_path) -> None:
    path = tmp_path / "broken.doc"
    path.write_bytes(b"not a word file")

    with pytest.raises(DocumentError):
        extract_file_text(str(path), "application/msword")


def test_unsupported_type_is_rejected() -> None:
    upload = make_upload(b"\x89PNG", "diagram.png", "image/png")

    with pytest.raises(UnsupportedDocumentError, match="image/png"):
        asyncio.run(extract_upload_text(upload, max_bytes=1024))


def test_oversized_upload_is_rejected() -> None:
    upload = make_upload(b"x" * 2048, "big.txt", "text/plain")

    with pytest.raises(DocumentError, match="File too large"):
        asyncio.run(extract_upload_text(upload, max_bytes=1024))


def test_temporary_file_is_removed_on_success(monkeypatch) -> None:
    seen = []
    original = documents.extract_file_text

    def spy(path: str, content_type: str) -> str:
        seen.append(path)
        assert os.path.exists(path)
        return original(path, content_type)

    monkeypatch.setattr(documents, "extract_file_text", spy)

    asyncio.run(extract_upload_text(make_upload(b"hello", "a.txt", "text/plain"), max_bytes=1024))

    assert len(seen) == 1
    assert not os.path.exists(seen[0])


def test_temporary_file_is_removed_on_failure(monkeypatch) -> None:
    seen = []

    def failing(path: str, content_type: str) -> str:
        seen.append(path)
        raise DocumentError("unreadable")

    monkeypatch.setattr(documents, "extract_file_text", failing)

    with pytest.raises(DocumentError):
        asyncio.run(extract_upload_text(make_upload(b"%PDF", "a.pdf", "application/pdf"), max_bytes=1024))

    assert len(seen) == 1
    assert not os.path.exists(seen[0])


def test_extraction_does_not_block_the_event_loop(monkeypatch) -> None:
    def slow_reader(path: str) -> str:
        time.sleep(0.3)
        return "parsed"

    monkeypatch.setitem(documents.EXTRACTORS, "text/plain", slow_reader)

    async def scenario():
        ticks = []
        done = asyncio.Event()

        async def ticker() -> None:
            while not done.is_set():
                ticks.append(time.monotonic())
                await asyncio.sleep(0.02)

        ticker_task = asyncio.create_task(ticker())
        text = await extract_upload_text(make_upload(b"x", "a.txt", "text/plain"), max_bytes=1024)
        done.set()
        await ticker_task
        return text, ticks

    text, ticks = asyncio.run(scenario())

    assert text == "parsed"
    gaps = [later - earlier for earlier, later in zip(ticks, ticks[1:])]
    assert len(ticks) > 5
    assert max(gaps) < 0.2
