from __future__ import annotations

from . import exports, health, test_cases

__all__ = [
    "exports",
    "health",
    "test_cases",
]
