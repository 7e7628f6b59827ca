from __future__ import annotations

import json
import re
from typing import Any, Iterable, List

_JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


def dump_pretty(values: Iterable[Any]) -> str:
    return json.dumps(list(values), indent=2, ensure_ascii=False)


def extract_json_array(raw: str) -> List[Any]:
    """Return the outermost JSON array embedded in ``raw``.

    Raises ``ValueError`` when there is no array or it does not parse.
    """
    if not raw:
        raise ValueError("Empty response")
    match = _JSON_ARRAY_PATTERN.search(raw)
    if match is None:
        raise ValueError("No JSON array found in response")
    data = json.loads(match.group(0))
    if not isinstance(data, list):
        raise ValueError("Response JSON is not an array")
    return data


def load_string_list(raw: str) -> List[str]:
    """Parse a JSON array of strings, as sent by multipart form fields."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON list: {exc.msg}") from exc
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array")
    return [str(value).strip() for value in data if str(value).strip()]
