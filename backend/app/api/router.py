from __future__ import annotations

from fastapi import FastAPI

from .routes import exports, health, test_cases


def register_routes(app: FastAPI) -> None:
    app.include_router(test_cases.router)
    app.include_router(exports.router)
    app.include_router(health.router)
