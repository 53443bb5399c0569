from typing import List, Optional

import pytest

from emojilens.api.deps import get_code_host, get_test_generator
from emojilens.main import app
from emojilens.schemas.testgen import FileContent, GitHubUser, PullRequestData, RepoFile
from emojilens.schemas import testgen as testgen_schemas
from emojilens.services.ai_service import TestGenerationError, TestGenerator
from emojilens.services.github_service import CodeHost, CodeHostError
from emojilens.services.storage import storage

REPO_FILES = {
    "src/math.js": "export const add = (a, b) => a + b;\n",
    "src/strings.js": "export const shout = (s) => s.toUpperCase();\n",
}


class FakeCodeHost(CodeHost):
    def __init__(self):
        self.pull_requests: List[PullRequestData] = []
        self.fail_files = False

    def authorize_url(self, state: Optional[str] = None) -> str:
        return "https://github.com/login/oauth/authorize?client_id=test"

    def exchange_code_for_token(self, code):
        if code == "bad":
            raise CodeHostError("GitHub OAuth error: bad_verification_code")
        return "gho_token", GitHubUser(id=42, login="octocat", avatar_url="https://a/42", email=None)

    def get_user_repositories(self, token):
        return [
            {"github_id": 1, "name": "demo", "full_name": "octocat/demo",
             "private": False, "default_branch": "main"},
            {"github_id": 2, "name": "secret", "full_name": "octocat/secret",
             "private": True, "default_branch": "trunk"},
        ]

    def get_repository_contents(self, token, repo_full_name, path="", branch="main"):
        return [
            RepoFile(name="src", path="src", type="dir"),
            RepoFile(name="README.md", path="README.md", type="file", size=12),
        ]

    def get_file_content(self, token, repo_full_name, file_path, branch="main"):
        if self.fail_files:
            raise CodeHostError("GitHub API error: 404 Not Found")
        return REPO_FILES.get(file_path, "")

    def create_pull_request(self, token, repo_full_name, pr_data):
        self.pull_requests.append(pr_data)
        return {"html_url": f"https://github.com/{repo_full_name}/pull/7", "number": 7}


class FakeTestGenerator(TestGenerator):
    def __init__(self):
        self.fail = False
        self.seen_files: List[FileContent] = []

    def generate_test_case_summaries(self, files, framework):
        self.seen_files = list(files)
        if self.fail:
            raise TestGenerationError("Failed to generate test case summaries: quota exceeded")
        return [
            testgen_schemas.TestCaseSummary(
                title="Math helpers",
                description="Covers add()",
                test_type="unit",
                filename="math.test.js",
                estimated_tests=3,
                estimated_coverage=90,
                estimated_runtime="~30 sec",
            )
        ]

    def generate_test_code(self, files, summary, framework):
        return f"// {framework}: {summary.title}\ntest('adds', () => {{}});"


@pytest.fixture(autouse=True)
def clean_storage():
    storage.clear()
    yield
    storage.clear()
    app.dependency_overrides.clear()


@pytest.fixture
def code_host():
    fake = FakeCodeHost()
    app.dependency_overrides[get_code_host] = lambda: fake
    return fake


@pytest.fixture
def generator():
    fake = FakeTestGenerator()
    app.dependency_overrides[get_test_generator] = lambda: fake
    return fake
