from __future__ import annotations

ANALYSIS_PROMPT_TEMPLATE = (
    'Analyze the following feature documentation for "{feature_name}":\n'
    "\n"
    "{content}\n"
    "\n"
    "Extract key information for test case generation:\n"
    "1. Main functionality\n"
    "2. User workflows\n"
    "3. Input/output requirements\n"
    "4. Business rules\n"
    "5. Integration points\n"
    "6. Security considerations\n"
    "7. Edge cases\n"
    "\n"
    "Provide a structured analysis."
)

TEST_CASE_PROMPT_TEMPLATE = (
    'Generate {count} {category} test cases for "{feature_name}":\n'
    "\n"
    "{analysis}\n"
    "\n"
    "Format as JSON array with fields: id, summary, priority, type, category, "
    "preconditions, steps, expectedResult."
)

CONNECTION_TEST_PROMPT = 'Hello! Please respond with "Groq API connection successful"'


def render_analysis_prompt(feature_name: str, content: str) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(feature_name=feature_name, content=content)


def render_test_case_prompt(feature_name: str, analysis: str, category: str, count: int) -> str:
    return TEST_CASE_PROMPT_TEMPLATE.format(
        feature_name=feature_name,
        analysis=analysis,
        category=category,
        count=count,
    )
