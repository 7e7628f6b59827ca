from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_GROQ_MODEL = "llama-3.1-70b-versatile"


@dataclass(frozen=True)
class Settings:
    groq_api_url: str = DEFAULT_GROQ_API_URL
    groq_model: str = DEFAULT_GROQ_MODEL
    temperature: float = 0.7
    timeout_seconds: float = 60.0
    api_key_prefix: str = "gsk_"
    category_delay_seconds: float = 2.0
    max_upload_bytes: int = 10 * 1024 * 1024
    max_test_count: int = 20
    log_level: str = "INFO"


def load_settings() -> Settings:
    return Settings(
        groq_api_url=os.getenv("GROQ_API_URL", DEFAULT_GROQ_API_URL),
        groq_model=os.getenv("GROQ_MODEL", DEFAULT_GROQ_MODEL),
        temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
        timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "60")),
        api_key_prefix=os.getenv("API_KEY_PREFIX", "gsk_"),
        category_delay_seconds=float(os.getenv("CATEGORY_DELAY_SECONDS", "2")),
        max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
        max_test_count=int(os.getenv("MAX_TEST_COUNT", "20")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
