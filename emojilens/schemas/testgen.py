from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

TestType = Literal["unit", "integration", "e2e"]
GenerationStatus = Literal["generating", "completed", "failed"]


class GitHubUser(BaseModel):
    id: int
    login: str
    avatar_url: Optional[str] = None
    email: Optional[str] = None


class Repository(BaseModel):
    id: str
    user_id: str
    github_id: int
    name: str
    full_name: str
    private: bool = False
    default_branch: str = "main"


class RepoFile(BaseModel):
    name: str
    path: str
    type: Literal["file", "dir"]
    size: Optional[int] = None
    download_url: Optional[str] = None


class FileContent(BaseModel):
    path: str
    content: str


class FileContentResponse(BaseModel):
    content: str


class TestCaseSummary(BaseModel):
    title: str
    description: str
    test_type: TestType = "unit"
    filename: str
    estimated_tests: int
    estimated_coverage: int
    estimated_runtime: str


class TestCaseGeneration(BaseModel):
    id: str
    user_id: str
    repository_id: str
    selected_files: List[str]
    framework: str
    status: GenerationStatus = "generating"
    summaries: List[TestCaseSummary] = Field(default_factory=list)
    error: Optional[str] = None
    created_at: datetime


class GeneratedTestCase(BaseModel):
    id: str
    generation_id: str
    summary_index: int
    title: str
    description: str
    test_type: TestType
    filename: str
    framework: str
    code: str
    pr_url: Optional[str] = None
    created_at: datetime


class PullRequestData(BaseModel):
    title: str
    description: str
    branch_name: str
    file_name: str
    file_content: str
    base_branch: str


class GenerateTestCasesRequest(BaseModel):
    user_id: str
    repository_id: str
    selected_files: List[str] = Field(default_factory=list)
    framework: str = "jest"


class GenerateTestCodeRequest(BaseModel):
    generation_id: str
    summary_index: int = Field(ge=0)


class CreatePullRequestRequest(BaseModel):
    repository_id: str
    test_case_id: str
    branch_name: str
    title: str
    description: str = ""
    base_branch: Optional[str] = None


class PullRequestResponse(BaseModel):
    pr_url: str
    number: Optional[int] = None
