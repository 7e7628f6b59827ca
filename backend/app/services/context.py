from __future__ import annotations

import re
from collections import Counter
from typing import List, Optional

from ..schemas import DocumentContext

LOGIN_PATTERN = re.compile(r"login|signin|authenticate|password", re.IGNORECASE)
FORM_PATTERN = re.compile(r"form|input|submit|validation", re.IGNORECASE)
API_PATTERN = re.compile(r"api|endpoint|service|integration", re.IGNORECASE)
DATABASE_PATTERN = re.compile(r"database|data|store|save|retrieve", re.IGNORECASE)

WORD_PATTERN = re.compile(r"\b\w+\b")
STOP_WORDS = frozenset({"this", "that", "with", "have", "will", "from", "they", "been", "were"})
MIN_KEYWORD_LENGTH = 4
MAX_KEYWORDS = 5


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> List[str]:
    words = [
        word
        for word in (token.lower() for token in WORD_PATTERN.findall(text))
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    ]
    # most_common keeps first-seen order for equal counts
    return [word for word, _ in Counter(words).most_common(limit)]


def extract_context(text: Optional[str]) -> DocumentContext:
    """Scan documentation for feature signals used by fallback synthesis."""
    if not text:
        return DocumentContext()
    return DocumentContext(
        has_login=bool(LOGIN_PATTERN.search(text)),
        has_form=bool(FORM_PATTERN.search(text)),
        has_api=bool(API_PATTERN.search(text)),
        has_database=bool(DATABASE_PATTERN.search(text)),
        keywords=tuple(extract_keywords(text)),
    )


__all__ = ["extract_context", "extract_keywords"]
