import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from emojilens.api.deps import get_code_host, get_storage, get_test_generator
from emojilens.api.v1.endpoints.repositories import fetch_files, repository_with_token
from emojilens.schemas.testgen import (
    CreatePullRequestRequest,
    GeneratedTestCase,
    GenerateTestCasesRequest,
    GenerateTestCodeRequest,
    PullRequestData,
    PullRequestResponse,
    Repository,
    TestCaseGeneration,
)
from emojilens.services.ai_service import TestGenerationError, TestGenerator
from emojilens.services.github_service import CodeHost, CodeHostError
from emojilens.services.storage import MemStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["test-generation"])


def run_generation(
    generation_id: str,
    repo: Repository,
    token: str,
    store: MemStorage,
    code_host: CodeHost,
    generator: TestGenerator,
) -> None:
    """Background job: fetch the selected files and ask the model for summaries."""
    generation = store.get_generation(generation_id)
    if generation is None:
        return
    try:
        files = fetch_files(code_host, token, repo, generation.selected_files)
        summaries = generator.generate_test_case_summaries(files, generation.framework)
    except (CodeHostError, TestGenerationError) as e:
        logger.error(f"Test case generation {generation_id} failed: {e}")
        store.update_generation(generation_id, status="failed", error=str(e))
        return
    except Exception as e:
        logger.exception(f"Test case generation {generation_id} crashed")
        store.update_generation(generation_id, status="failed", error=str(e) or type(e).__name__)
        return
    store.update_generation(generation_id, status="completed", summaries=summaries)
    logger.info(f"Test case generation {generation_id} completed with {len(summaries)} summaries")


@router.post("/generate-test-cases", response_model=TestCaseGeneration)
def generate_test_cases(
    request: GenerateTestCasesRequest,
    background_tasks: BackgroundTasks,
    store: MemStorage = Depends(get_storage),
    code_host: CodeHost = Depends(get_code_host),
    generator: TestGenerator = Depends(get_test_generator),
) -> TestCaseGeneration:
    if not request.selected_files:
        raise HTTPException(status_code=400, detail="Select at least one file")

    repo, token = repository_with_token(store, request.repository_id)
    if repo.user_id != request.user_id:
        raise HTTPException(status_code=404, detail="Repository not found")

    generation = store.create_generation(
        user_id=request.user_id,
        repository_id=repo.id,
        selected_files=request.selected_files,
        framework=request.framework,
    )
    background_tasks.add_task(run_generation, generation.id, repo, token, store, code_host, generator)
    return generation


@router.get("/test-case-generation/{generation_id}", response_model=TestCaseGeneration)
def get_generation(generation_id: str, store: MemStorage = Depends(get_storage)) -> TestCaseGeneration:
    generation = store.get_generation(generation_id)
    if not generation:
        raise HTTPException(status_code=404, detail="Test case generation not found")
    return generation


@router.get(
    "/test-case-generation/{generation_id}/generated-tests",
    response_model=List[GeneratedTestCase],
)
def list_generated_tests(
    generation_id: str, store: MemStorage = Depends(get_storage)
) -> List[GeneratedTestCase]:
    if not store.get_generation(generation_id):
        raise HTTPException(status_code=404, detail="Test case generation not found")
    return store.get_generated_tests_by_generation(generation_id)


@router.post("/generate-test-code", response_model=GeneratedTestCase)
def generate_test_code(
    request: GenerateTestCodeRequest,
    store: MemStorage = Depends(get_storage),
    code_host: CodeHost = Depends(get_code_host),
    generator: TestGenerator = Depends(get_test_generator),
) -> GeneratedTestCase:
    generation = store.get_generation(request.generation_id)
    if not generation:
        raise HTTPException(status_code=404, detail="Test case generation not found")
    if generation.status != "completed":
        raise HTTPException(status_code=409, detail=f"Test case generation is {generation.status}")
    if request.summary_index >= len(generation.summaries):
        raise HTTPException(status_code=400, detail="Summary index out of range")

    summary = generation.summaries[request.summary_index]
    repo, token = repository_with_token(store, generation.repository_id)
    try:
        files = fetch_files(code_host, token, repo, generation.selected_files)
        code = generator.generate_test_code(files, summary, generation.framework)
    except (CodeHostError, TestGenerationError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    return store.create_generated_test(
        generation_id=generation.id,
        summary_index=request.summary_index,
        summary=summary,
        framework=generation.framework,
        code=code,
    )


@router.get("/generated-test-case/{test_case_id}", response_model=GeneratedTestCase)
def get_generated_test(test_case_id: str, store: MemStorage = Depends(get_storage)) -> GeneratedTestCase:
    test_case = store.get_generated_test(test_case_id)
    if not test_case:
        raise HTTPException(status_code=404, detail="Generated test case not found")
    return test_case


@router.post("/create-pr", response_model=PullRequestResponse)
def create_pull_request(
    request: CreatePullRequestRequest,
    store: MemStorage = Depends(get_storage),
    code_host: CodeHost = Depends(get_code_host),
) -> PullRequestResponse:
    test_case = store.get_generated_test(request.test_case_id)
    if not test_case:
        raise HTTPException(status_code=404, detail="Generated test case not found")
    repo, token = repository_with_token(store, request.repository_id)
    generation = store.get_generation(test_case.generation_id)
    if not generation or generation.repository_id != repo.id:
        raise HTTPException(status_code=400, detail="Test case was not generated for this repository")

    pr_data = PullRequestData(
        title=request.title,
        description=request.description,
        branch_name=request.branch_name,
        file_name=test_case.filename,
        file_content=test_case.code,
        base_branch=request.base_branch or repo.default_branch,
    )
    try:
        pr = code_host.create_pull_request(token, repo.full_name, pr_data)
    except CodeHostError as e:
        raise HTTPException(status_code=502, detail=str(e))

    pr_url = pr.get("html_url", "")
    store.set_generated_test_pr_url(test_case.id, pr_url)
    return PullRequestResponse(pr_url=pr_url, number=pr.get("number"))
