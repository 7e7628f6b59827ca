"""Template based test case synthesis used when the language model is unavailable."""

from __future__ import annotations

from typing import Callable, Dict, List, NamedTuple

from ..schemas import DocumentContext, Priority, TestCase, TestCategory

StepBuilder = Callable[[str, int, DocumentContext], List[str]]


class CategoryTemplate(NamedTuple):
    title: str
    expected_result: str
    steps: StepBuilder


def _functional_steps(feature: str, index: int, context: DocumentContext) -> List[str]:
    if context.has_login and index == 1:
        return [
            f"Navigate to the {feature} login page",
            "Sign in with valid user credentials",
            f"Open {feature} and perform the primary action",
            "Verify the action completes and the result is displayed",
        ]
    if context.has_form:
        return [
            f"Open the {feature} form",
            "Fill in all required fields with valid data",
            "Submit the form",
            "Verify the submission succeeds and a confirmation is shown",
        ]
    if context.has_api:
        return [
            f"Trigger the {feature} operation that calls the API",
            "Capture the API request and response",
            "Verify the response status and payload are correct",
        ]
    return [
        f"Access {feature}",
        f"Perform the main {feature} operation",
        "Verify the operation completes successfully",
    ]


def _ui_steps(feature: str, index: int, context: DocumentContext) -> List[str]:
    if index == 1:
        return [
            f"Open {feature} in a desktop browser",
            "Check page layout, alignment and visual consistency",
            "Navigate through every menu and link",
            "Verify navigation leads to the correct pages",
        ]
    if index == 2:
        return [
            f"Open {feature} on a mobile device or narrow viewport",
            "Switch between portrait and landscape orientation",
            "Verify content reflows without overlap or horizontal scrolling",
            "Verify touch targets are large enough to use",
        ]
    return [
        f"Interact with {feature} controls using mouse and keyboard",
        "Navigate using only the keyboard (Tab, Enter, Esc)",
        "Check screen reader labels and colour contrast",
        "Verify focus states and feedback messages are visible",
    ]


def _negative_steps(feature: str, index: int, context: DocumentContext) -> List[str]:
    if context.has_form:
        return [
            f"Open the {feature} form",
            "Enter invalid data: empty required fields, wrong formats, oversized values",
            "Submit the form",
            "Verify validation errors are shown and no data is saved",
        ]
    if context.has_login:
        return [
            f"Navigate to the {feature} login page",
            "Attempt to sign in with invalid credentials",
            f"Attempt to open {feature} directly without signing in",
            "Verify access is denied with an appropriate error",
        ]
    return [
        f"Access {feature}",
        "Provide invalid or unexpected input",
        "Verify the input is rejected gracefully with an error message",
    ]


def _security_steps(feature: str, index: int, context: DocumentContext) -> List[str]:
    if context.has_login:
        return [
            "Attempt to sign in with a weak or incorrect password",
            "Verify password rules and account lockout are enforced",
            "Sign in and verify the session expires after inactivity",
            "Logout and verify the session is invalidated",
        ]
    if context.has_api:
        return [
            f"Call the {feature} API without an authentication token",
            "Verify the request is rejected as unauthorized",
            "Send payloads containing script and SQL injection strings",
            "Verify input is sanitized and errors expose no internal details",
        ]
    return [
        f"Access {feature}",
        "Enter malicious input such as script tags and SQL fragments",
        "Verify the input is validated and rejected",
        "Verify sensitive data is not exposed in responses or logs",
    ]


TEMPLATES: Dict[TestCategory, CategoryTemplate] = {
    TestCategory.FUNCTIONAL: CategoryTemplate(
        "Verify {feature} functional workflow",
        "{feature} completes the workflow and shows the expected result",
        _functional_steps,
    ),
    TestCategory.UI_UX: CategoryTemplate(
        "Verify {feature} user interface",
        "{feature} renders correctly and remains usable",
        _ui_steps,
    ),
    TestCategory.NEGATIVE: CategoryTemplate(
        "Verify {feature} rejects invalid input",
        "{feature} rejects the input with a clear error and no data is changed",
        _negative_steps,
    ),
    TestCategory.SECURITY: CategoryTemplate(
        "Verify {feature} security controls",
        "{feature} enforces its security controls and exposes no sensitive information",
        _security_steps,
    ),
}


def _generic_template(category: str) -> CategoryTemplate:
    label = category.lower()
    escaped = label.replace("{", "{{").replace("}", "}}")

    def steps(feature: str, index: int, context: DocumentContext) -> List[str]:
        return [f"Access {feature}", f"Perform {label} test", "Verify results"]

    return CategoryTemplate(
        f"Verify {{feature}} {escaped} functionality",
        f"{{feature}} behaves correctly for {escaped} scenario",
        steps,
    )


def priority_for(index: int) -> Priority:
    if index <= 2:
        return Priority.HIGH
    if index <= 4:
        return Priority.MEDIUM
    return Priority.LOW


def _preconditions(feature: str, context: DocumentContext) -> str:
    text = f"{feature} is accessible and the user has the required permissions"
    if context.has_login:
        text += "; valid user credentials are available"
    return text


def _keyword_clause(context: DocumentContext) -> str:
    if not context.keywords:
        return ""
    return " involving " + " and ".join(context.keywords[:2])


def synthesize(
    feature_name: str,
    category: str,
    count: int,
    context: DocumentContext,
) -> List[TestCase]:
    """Build ``count`` deterministic test cases for one category."""
    member = TestCategory.parse(category)
    template = TEMPLATES[member] if member is not None else _generic_template(category)
    keyword_clause = _keyword_clause(context)
    preconditions = _preconditions(feature_name, context)

    cases: List[TestCase] = []
    for index in range(1, count + 1):
        steps = template.steps(feature_name, index, context)
        cases.append(
            TestCase(
                id=f"TC_{category.upper()}_{index:03d}",
                summary=(
                    template.title.format(feature=feature_name)
                    + f"{keyword_clause} - Scenario {index}"
                ),
                priority=priority_for(index).value,
                type=category,
                category=f"{category} Testing",
                preconditions=preconditions,
                steps="\n".join(f"{number}. {step}" for number, step in enumerate(steps, start=1)),
                expected_result=template.expected_result.format(feature=feature_name),
            )
        )
    return cases


__all__ = ["priority_for", "synthesize"]
