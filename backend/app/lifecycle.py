from __future__ import annotations

import logging
import time

from fastapi import FastAPI

from .core.settings import get_settings

logger = logging.getLogger(__name__)


def register_events(app: FastAPI) -> None:
    app.state.started_at = time.monotonic()

    @app.on_event("startup")
    async def _on_startup() -> None:
        settings = get_settings()
        app.state.started_at = time.monotonic()
        logger.info(
            "Test case service started: model=%s endpoint=%s category_delay=%ss",
            settings.groq_model,
            settings.groq_api_url,
            settings.category_delay_seconds,
        )

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        logger.info("Test case service stopped")
