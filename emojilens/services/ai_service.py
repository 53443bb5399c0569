"""
Test case generation with Gemini.

GeminiTestGenerator builds prompts from repository files, asks the model for
test case summaries (structured JSON) or test code (plain text), and
validates what comes back before it reaches the API layer.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types

from emojilens.core.config import settings
from emojilens.schemas.testgen import FileContent, TestCaseSummary

logger = logging.getLogger(__name__)

TEST_TYPES = ("unit", "integration", "e2e")

SUMMARY_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING"},
            "description": {"type": "STRING"},
            "testType": {"type": "STRING", "enum": list(TEST_TYPES)},
            "filename": {"type": "STRING"},
            "estimatedTests": {"type": "NUMBER"},
            "estimatedCoverage": {"type": "NUMBER"},
            "estimatedRuntime": {"type": "STRING"},
        },
        "required": [
            "title",
            "description",
            "testType",
            "filename",
            "estimatedTests",
            "estimatedCoverage",
            "estimatedRuntime",
        ],
    },
}

FRAMEWORK_INSTRUCTIONS = {
    "jest": """Use Jest testing framework with the following patterns:
- Import syntax: const { functionName } = require('./module') or import { functionName } from './module'
- Describe blocks for grouping related tests
- test() or it() functions for individual test cases
- expect() assertions with appropriate matchers (.toBe(), .toEqual(), .toThrow(), etc.)
- beforeEach()/afterEach() for setup/cleanup
- Mock functions with jest.fn() and jest.mock()
- Async testing with async/await or return promises""",
    "pytest": """Use PyTest testing framework with the following patterns:
- Function names starting with test_
- Use assert statements for assertions
- Use pytest.fixture for setup/teardown
- Use pytest.parametrize for data-driven tests
- Use pytest.raises for exception testing
- Import modules using standard Python import syntax
- Use mock.patch for mocking external dependencies""",
    "junit": """Use JUnit 5 testing framework with the following patterns:
- Use @Test annotation for test methods
- Use @BeforeEach and @AfterEach for setup/cleanup
- Use Assertions class for assertions (assertEquals, assertTrue, assertThrows, etc.)
- Use @ParameterizedTest for data-driven tests
- Use @Mock and @MockBean for mocking
- Follow proper Java package structure and imports""",
    "selenium": """Use Selenium WebDriver with PyTest for E2E testing:
- Import WebDriver and necessary Selenium modules
- Use Page Object Model pattern where appropriate
- Include proper WebDriver setup and teardown
- Use explicit waits (WebDriverWait) instead of implicit waits
- Include assertions for UI elements and behaviors
- Test both positive and negative user scenarios
- Include proper error handling for element not found cases""",
}


class TestGenerationError(Exception):
    """Raised when the model call fails or returns something unusable."""


class TestGenerator(ABC):
    """Capability the API layer needs from a test-writing model."""

    @abstractmethod
    def generate_test_case_summaries(
        self, files: List[FileContent], framework: str
    ) -> List[TestCaseSummary]:
        pass

    @abstractmethod
    def generate_test_code(
        self, files: List[FileContent], summary: TestCaseSummary, framework: str
    ) -> str:
        pass


def format_files(files: List[FileContent]) -> str:
    return "\n\n".join(f"File: {f.path}\n```\n{f.content}\n```" for f in files)


def framework_instructions(framework: str) -> str:
    return FRAMEWORK_INSTRUCTIONS.get(framework, FRAMEWORK_INSTRUCTIONS["jest"])


def _clamp(value: Any, default: int, low: int, high: int) -> int:
    try:
        number = int(round(float(value))) if value else default
    except (TypeError, ValueError):
        number = default
    return max(low, min(high, number))


def sanitize_summary(raw: Dict[str, Any]) -> TestCaseSummary:
    """Fill in defaults and clamp estimates on one model-produced summary."""

    def pick(*keys: str) -> Any:
        for key in keys:
            if raw.get(key) not in (None, ""):
                return raw[key]
        return None

    test_type = pick("testType", "test_type")
    return TestCaseSummary(
        title=pick("title") or "Untitled Test Case",
        description=pick("description") or "Test case description",
        test_type=test_type if test_type in TEST_TYPES else "unit",
        filename=pick("filename") or "test.js",
        estimated_tests=_clamp(pick("estimatedTests", "estimated_tests"), 5, 1, 50),
        estimated_coverage=_clamp(pick("estimatedCoverage", "estimated_coverage"), 80, 0, 100),
        estimated_runtime=pick("estimatedRuntime", "estimated_runtime") or "~2 min",
    )


def parse_summaries(raw_json: Optional[str]) -> List[TestCaseSummary]:
    if not raw_json:
        raise TestGenerationError("Empty response from AI model")
    payload = json.loads(raw_json)
    if not isinstance(payload, list):
        raise TestGenerationError("Expected a JSON array of test case summaries")
    return [sanitize_summary(item) for item in payload if isinstance(item, dict)]


def summary_system_prompt(framework: str) -> str:
    return f"""You are an expert software testing engineer specializing in {framework} test case generation.
Analyze the provided code files and generate comprehensive test case summaries.

For each logical group of functionality that should be tested together, create a test case summary with:
1. A descriptive title
2. Detailed description of what will be tested
3. Test type (unit, integration, or e2e)
4. Suggested filename for the test file
5. Estimated number of test methods
6. Estimated test coverage percentage (realistic estimate)
7. Estimated runtime (e.g., "~2 min", "~30 sec")

Consider:
- Edge cases and error handling
- Input validation
- Business logic correctness
- Integration points between modules
- Performance considerations where relevant
- Security aspects if applicable

Return a JSON array of test case summaries. Each summary should follow this structure:
{{
  "title": "descriptive title",
  "description": "detailed description of test scope and coverage",
  "testType": "unit|integration|e2e",
  "filename": "suggested test filename with proper extension",
  "estimatedTests": number,
  "estimatedCoverage": number,
  "estimatedRuntime": "time estimate string"
}}"""


def code_system_prompt(framework: str) -> str:
    return f"""You are an expert software testing engineer specializing in {framework} test framework.
Generate comprehensive, production-ready test code based on the provided test case summary and source code files.

{framework_instructions(framework)}

Requirements:
1. Write complete, runnable test code
2. Include proper imports and setup/teardown
3. Cover the exact scenarios described in the test summary
4. Include edge cases, error handling, and input validation tests
5. Use proper assertions and test structure
6. Add descriptive test names and comments
7. Follow best practices for {framework} testing
8. Include mocking where appropriate for external dependencies
9. Ensure tests are independent and can run in any order
10. Add proper error messages for failed assertions

Return only the complete test code, properly formatted and ready to use."""


def code_prompt(files: List[FileContent], summary: TestCaseSummary, framework: str) -> str:
    return f"""Generate {framework} test code for:

Test Summary:
- Title: {summary.title}
- Description: {summary.description}
- Test Type: {summary.test_type}
- Filename: {summary.filename}
- Estimated Tests: {summary.estimated_tests}

Source Code Files:
{format_files(files)}

Generate comprehensive test code that covers all the functionality described in the summary."""


class GeminiTestGenerator(TestGenerator):
    """TestGenerator backed by the Gemini API through google-genai."""

    def __init__(
        self,
        client: Optional[Any] = None,
        summary_model: Optional[str] = None,
        code_model: Optional[str] = None,
    ):
        self._client = client
        self.summary_model = summary_model or settings.gemini_summary_model
        self.code_model = code_model or settings.gemini_code_model

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=settings.gemini_api_key)
        return self._client

    def generate_test_case_summaries(
        self, files: List[FileContent], framework: str
    ) -> List[TestCaseSummary]:
        try:
            response = self.client.models.generate_content(
                model=self.summary_model,
                contents=(
                    f"Analyze these code files and generate test case summaries for "
                    f"{framework} framework:\n\n{format_files(files)}"
                ),
                config=types.GenerateContentConfig(
                    system_instruction=summary_system_prompt(framework),
                    response_mime_type="application/json",
                    response_schema=SUMMARY_RESPONSE_SCHEMA,
                ),
            )
            summaries = parse_summaries(response.text)
        except Exception as e:
            logger.error(f"Error generating test case summaries: {e}")
            raise TestGenerationError(f"Failed to generate test case summaries: {e}") from e

        logger.info(f"Generated {len(summaries)} test case summaries for {len(files)} files")
        return summaries

    def generate_test_code(
        self, files: List[FileContent], summary: TestCaseSummary, framework: str
    ) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.code_model,
                contents=code_prompt(files, summary, framework),
                config=types.GenerateContentConfig(
                    system_instruction=code_system_prompt(framework),
                ),
            )
            code = response.text
            if not code:
                raise TestGenerationError("Empty response from AI model")
        except Exception as e:
            logger.error(f"Error generating test code: {e}")
            raise TestGenerationError(f"Failed to generate test code: {e}") from e

        return code.strip()
