from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError

from ..schemas import TestCase

logger = logging.getLogger(__name__)


def case_to_record(case: TestCase) -> Dict[str, Any]:
    return case.model_dump(mode="json", by_alias=True, exclude_unset=True)


def cases_to_records(cases: Iterable[TestCase]) -> List[Dict[str, Any]]:
    return [case_to_record(case) for case in cases]


def record_to_test_case(record: Any) -> TestCase:
    if not isinstance(record, dict):
        raise ValueError(f"Expected a test case object, got {type(record).__name__}")
    try:
        return TestCase.model_validate(record)
    except ValidationError as exc:
        raise ValueError(f"Invalid test case record: {exc.errors()[0]['msg']}") from exc


def records_to_test_cases(records: Iterable[Any]) -> List[TestCase]:
    return [record_to_test_case(record) for record in records]


def coerce_test_cases(records: Iterable[Any]) -> List[TestCase]:
    """Lenient variant for client supplied batches: unusable items are skipped."""
    cases: List[TestCase] = []
    for position, record in enumerate(records):
        try:
            cases.append(record_to_test_case(record))
        except ValueError as exc:
            logger.warning("Skipping test case at position %s: %s", position, exc)
    return cases


__all__ = [
    "coerce_test_cases",
    "record_to_test_case",
    "records_to_test_cases",
    "case_to_record",
    "cases_to_records",
]
