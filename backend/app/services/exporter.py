"""Render a batch of test cases into the downloadable export formats.

Every renderer is total: missing fields fall back to defaults so a partially
filled batch from the language model can always be exported. Column order is
fixed because the target tools import CSV files by position.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence

from ..schemas import PACKAGE_FORMATS, ExportArtifact, ExportFormat, TestCase
from ..schemas.test_case import STEP_NUMBER_PATTERN
from ..utils.json import dump_pretty
from .converters import case_to_record

XRAY_HEADERS = [
    "Test ID",
    "Summary",
    "Description",
    "Test Type",
    "Step",
    "Data",
    "Expected Result",
    "Repository",
]
SIMPLE_HEADERS = [
    "ID",
    "Summary",
    "Priority",
    "Type",
    "Category",
    "Preconditions",
    "Steps",
    "Expected Result",
    "Labels",
]
TESTRAIL_HEADERS = [
    "ID",
    "Title",
    "Section",
    "Template",
    "Type",
    "Priority",
    "Estimate",
    "References",
    "Automation Type",
    "Preconditions",
    "Steps",
    "Expected Result",
]
AZURE_HEADERS = [
    "ID",
    "Work Item Type",
    "Title",
    "Description",
    "State",
    "Priority",
    "Area Path",
    "Iteration Path",
    "Tags",
    "Test Steps",
    "Expected Result",
]
LEGACY_XRAY_HEADERS = [
    "Test Key",
    "Test Summary",
    "Test Type",
    "Test Priority",
    "Component",
    "Labels",
    "Test Repository Path",
    "Precondition",
    "Test Script (Step-by-Step)",
    "Expected Result",
    "Test Data",
    "Test Environment",
    "Test Execution Type",
    "Status",
]

# TestRail's import template labels these values this way; keep them as-is.
TESTRAIL_PRIORITIES = {
    "High": "1 - Don't Test",
    "Medium": "2 - Medium",
    "Low": "3 - High",
}
TESTRAIL_DEFAULT_PRIORITY = "2 - Medium"
AZURE_PRIORITIES = {"High": "1", "Medium": "2", "Low": "3"}
AZURE_DEFAULT_PRIORITY = "2"

DEFAULT_SUMMARY = "Test case"
DEFAULT_PRIORITY = "Medium"
DEFAULT_TYPE = "Functional"
DEFAULT_CATEGORY = "General"
DEFAULT_PRECONDITIONS = "System is ready"
DEFAULT_EXPECTED = "Expected behavior occurs"

_WHITESPACE = re.compile(r"\s+")


def escape_field(value: Any) -> str:
    if value is None:
        return '""'
    return '"' + str(value).replace('"', '""') + '"'


def csv_row(values: Iterable[Any]) -> str:
    return ",".join(escape_field(value) for value in values) + "\n"


def _or(value: Optional[str], default: str) -> str:
    return value if value else default


def _case_id(case: TestCase, index: int) -> str:
    return _or(case.id, f"TC-{index:04d}")


def _inline_steps(steps: Optional[str]) -> str:
    return (steps or "").replace("\n", "\\n")


def split_steps(steps: Optional[str]) -> List[str]:
    """Split free-text steps into atomic actions without their ``1.`` numbering."""
    cleaned = (STEP_NUMBER_PATTERN.sub("", line.strip()).strip() for line in (steps or "").splitlines())
    return [line for line in cleaned if line]


def map_priority_to_testrail(priority: Optional[str]) -> str:
    return TESTRAIL_PRIORITIES.get(priority or "", TESTRAIL_DEFAULT_PRIORITY)


def map_priority_to_azure(priority: Optional[str]) -> str:
    return AZURE_PRIORITIES.get(priority or "", AZURE_DEFAULT_PRIORITY)


def build_xray_csv(test_cases: Sequence[TestCase]) -> str:
    """Xray step-per-row CSV.

    Each test case becomes a group of rows sharing the same Test ID. Summary,
    Description, Test Type and Repository are only written on the first row of
    the group; the importer treats the blank cells below as merged.
    """
    content = csv_row(XRAY_HEADERS)
    for ordinal, case in enumerate(test_cases, start=1):
        summary = _or(case.summary, DEFAULT_SUMMARY)
        description = _or(case.preconditions, "Test description")
        repository = _or(case.category, DEFAULT_CATEGORY)
        steps = split_steps(case.steps)

        if not steps:
            content += csv_row(
                [
                    ordinal,
                    summary,
                    description,
                    "Manual",
                    "Execute test",
                    "",
                    _or(case.expected_result, "Test passes"),
                    repository,
                ]
            )
            continue

        expected = _or(case.expected_result, "Step completes")
        for step_index, step in enumerate(steps):
            first = step_index == 0
            content += csv_row(
                [
                    ordinal,
                    summary if first else "",
                    description if first else "",
                    "Manual" if first else "",
                    step,
                    "",
                    expected,
                    repository if first else "",
                ]
            )
    return content


def _numbered_script(steps: Optional[str]) -> str:
    return "\\n".join(f"{number}. {step}" for number, step in enumerate(split_steps(steps), start=1))


def _path_segment(value: Optional[str], default: str) -> str:
    return _WHITESPACE.sub("_", value) if value else default


def build_legacy_xray_csv(test_cases: Sequence[TestCase]) -> str:
    content = csv_row(LEGACY_XRAY_HEADERS)
    for index, case in enumerate(test_cases, start=1):
        test_type = case.type.lower() if case.type else "functional"
        content += csv_row(
            [
                _case_id(case, index),
                _or(case.summary, "Test case summary"),
                "Manual",
                _or(case.priority, DEFAULT_PRIORITY),
                _or(case.category, DEFAULT_CATEGORY),
                f"manual,ai-generated,{test_type}",
                "/{}/{}".format(
                    _path_segment(case.category, DEFAULT_CATEGORY),
                    _path_segment(case.type, DEFAULT_TYPE),
                ),
                _or(case.preconditions, DEFAULT_PRECONDITIONS),
                _numbered_script(case.steps),
                _or(case.expected_result, DEFAULT_EXPECTED),
                "",
                "Test Environment",
                "Manual",
                "Draft",
            ]
        )
    return content


def build_simple_csv(test_cases: Sequence[TestCase]) -> str:
    content = csv_row(SIMPLE_HEADERS)
    for index, case in enumerate(test_cases, start=1):
        content += csv_row(
            [
                _case_id(case, index),
                _or(case.summary, DEFAULT_SUMMARY),
                _or(case.priority, DEFAULT_PRIORITY),
                _or(case.type, DEFAULT_TYPE),
                _or(case.category, DEFAULT_CATEGORY),
                _or(case.preconditions, DEFAULT_PRECONDITIONS),
                _inline_steps(case.steps),
                _or(case.expected_result, DEFAULT_EXPECTED),
                "manual,ai-generated",
            ]
        )
    return content


def build_testrail_csv(test_cases: Sequence[TestCase]) -> str:
    content = csv_row(TESTRAIL_HEADERS)
    for index, case in enumerate(test_cases, start=1):
        content += csv_row(
            [
                _case_id(case, index),
                _or(case.summary, DEFAULT_SUMMARY),
                _or(case.category, DEFAULT_CATEGORY),
                "Test Case (Steps)",
                _or(case.type, DEFAULT_TYPE),
                map_priority_to_testrail(case.priority),
                "30m",
                "",
                "None",
                _or(case.preconditions, DEFAULT_PRECONDITIONS),
                _inline_steps(case.steps),
                _or(case.expected_result, DEFAULT_EXPECTED),
            ]
        )
    return content


def build_azure_csv(test_cases: Sequence[TestCase]) -> str:
    content = csv_row(AZURE_HEADERS)
    for index, case in enumerate(test_cases, start=1):
        preconditions = _or(case.preconditions, DEFAULT_PRECONDITIONS)
        test_type = _or(case.type, DEFAULT_TYPE)
        content += csv_row(
            [
                _case_id(case, index),
                "Test Case",
                _or(case.summary, DEFAULT_SUMMARY),
                f"{preconditions}\n\n{case.steps or ''}",
                "Design",
                map_priority_to_azure(case.priority),
                _or(case.category, DEFAULT_CATEGORY),
                "Sprint 1",
                f"manual; ai-generated; {test_type.lower()}",
                _inline_steps(case.steps),
                _or(case.expected_result, DEFAULT_EXPECTED),
            ]
        )
    return content


def build_json(test_cases: Sequence[TestCase]) -> str:
    return dump_pretty(case_to_record(case) for case in test_cases)


def _count_by(values: Iterable[str]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def _breakdown(counts: Dict[str, int]) -> str:
    return "\n".join(f"- {key}: {count}" for key, count in counts.items())


IMPORT_INSTRUCTIONS = """XRAY IMPORT INSTRUCTIONS:
========================

1. Go to Test Repository in Jira
2. Click "Import" > "Import Test Cases from CSV"
3. Upload the *_xray.csv file
4. The CSV matches the Xray template format:
   - Test ID (Integer)
   - Summary (String)
   - Description (String)
   - Test Type (String)
   - Step (String)
   - Data (String)
   - Expected Result (String)
   - Repository (String)
5. Map columns automatically and import

TESTRAIL:
1. Go to your TestRail project
2. Click "Cases" > "Import"
3. Upload the *_testrail.csv file
4. Follow the import wizard

AZURE DEVOPS:
1. Go to Test Plans in Azure DevOps
2. Click "Import test cases"
3. Upload the *_azure.csv file
4. Configure field mapping

Generated by AI QA Test Case Generator
"""


def build_summary_report(
    test_cases: Sequence[TestCase], feature_name: str, now: Optional[datetime] = None
) -> str:
    now = now or datetime.now()
    if now.tzinfo is not None:
        now = now.astimezone()
    by_type = _count_by(_or(case.type, DEFAULT_TYPE) for case in test_cases)
    by_priority = _count_by(_or(case.priority, DEFAULT_PRIORITY) for case in test_cases)
    return (
        "TEST CASE SUMMARY REPORT\n"
        "========================\n"
        "\n"
        f"Feature: {feature_name}\n"
        f"Generated: {now.month}/{now.day}/{now.year}\n"
        f"Total Test Cases: {len(test_cases)}\n"
        "\n"
        "BREAKDOWN BY TYPE:\n"
        f"{_breakdown(by_type)}\n"
        "\n"
        "BREAKDOWN BY PRIORITY:\n"
        f"{_breakdown(by_priority)}\n"
        "\n"
        f"{IMPORT_INSTRUCTIONS}"
    )


class _Renderer(NamedTuple):
    suffix: str
    description: str
    render: Callable[[Sequence[TestCase], str, datetime], str]


RENDERERS: Dict[ExportFormat, _Renderer] = {
    ExportFormat.XRAY: _Renderer(
        "xray.csv",
        "Xray Test Management CSV format",
        lambda cases, feature, now: build_xray_csv(cases),
    ),
    ExportFormat.SIMPLE: _Renderer(
        "simple.csv",
        "Simple CSV format for basic imports",
        lambda cases, feature, now: build_simple_csv(cases),
    ),
    ExportFormat.TESTRAIL: _Renderer(
        "testrail.csv",
        "TestRail compatible format",
        lambda cases, feature, now: build_testrail_csv(cases),
    ),
    ExportFormat.AZURE: _Renderer(
        "azure.csv",
        "Azure DevOps compatible format",
        lambda cases, feature, now: build_azure_csv(cases),
    ),
    ExportFormat.JSON: _Renderer(
        "data.json",
        "JSON format for custom integrations",
        lambda cases, feature, now: build_json(cases),
    ),
    ExportFormat.SUMMARY: _Renderer(
        "summary.txt",
        "Human-readable test summary report",
        build_summary_report,
    ),
    ExportFormat.XRAY_LEGACY: _Renderer(
        "xray_legacy.csv",
        "Legacy one-row-per-test Xray CSV format",
        lambda cases, feature, now: build_legacy_xray_csv(cases),
    ),
}


def filename_timestamp(now: datetime) -> str:
    """``YYYY-MM-DDTHH-MM-SS`` in UTC, safe for file names."""
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S")


def base_filename(feature_name: str, now: datetime) -> str:
    return f"{_WHITESPACE.sub('_', feature_name)}_{filename_timestamp(now)}"


def build_export(
    export_format: ExportFormat,
    test_cases: Sequence[TestCase],
    feature_name: str,
    now: Optional[datetime] = None,
) -> ExportArtifact:
    now = now or datetime.now(timezone.utc)
    renderer = RENDERERS[export_format]
    return ExportArtifact(
        filename=f"{base_filename(feature_name, now)}_{renderer.suffix}",
        content=renderer.render(test_cases or [], feature_name, now),
        description=renderer.description,
    )


def build_export_package(
    test_cases: Optional[Sequence[TestCase]],
    feature_name: str,
    now: Optional[datetime] = None,
) -> Dict[str, ExportArtifact]:
    """Render all package formats from one snapshot of the batch."""
    now = now or datetime.now(timezone.utc)
    cases = list(test_cases or [])
    return {
        export_format.value: build_export(export_format, cases, feature_name, now)
        for export_format in PACKAGE_FORMATS
    }


__all__ = [
    "build_azure_csv",
    "build_export",
    "build_export_package",
    "build_json",
    "build_legacy_xray_csv",
    "build_simple_csv",
    "build_summary_report",
    "build_testrail_csv",
    "build_xray_csv",
    "escape_field",
    "map_priority_to_azure",
    "map_priority_to_testrail",
    "split_steps",
]
