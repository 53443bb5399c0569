from typing import List, Tuple

from fastapi import APIRouter, Depends, HTTPException

from emojilens.api.deps import get_code_host, get_storage
from emojilens.schemas.testgen import FileContent, FileContentResponse, Repository, RepoFile
from emojilens.services.github_service import CodeHost, CodeHostError
from emojilens.services.storage import MemStorage

router = APIRouter(tags=["repositories"])


def user_token(store: MemStorage, user_id: str) -> str:
    user = store.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.access_token:
        raise HTTPException(status_code=401, detail="User is not connected to GitHub")
    return user.access_token


def repository_with_token(store: MemStorage, repository_id: str) -> Tuple[Repository, str]:
    repo = store.get_repository(repository_id)
    if not repo:
        raise HTTPException(status_code=404, detail="Repository not found")
    return repo, user_token(store, repo.user_id)


def fetch_files(
    code_host: CodeHost, token: str, repo: Repository, paths: List[str]
) -> List[FileContent]:
    return [
        FileContent(
            path=path,
            content=code_host.get_file_content(token, repo.full_name, path, repo.default_branch),
        )
        for path in paths
    ]


@router.get("/user/{user_id}/repositories", response_model=List[Repository])
def list_repositories(
    user_id: str,
    store: MemStorage = Depends(get_storage),
    code_host: CodeHost = Depends(get_code_host),
) -> List[Repository]:
    token = user_token(store, user_id)
    try:
        repos = code_host.get_user_repositories(token)
    except CodeHostError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return store.upsert_repositories(user_id, repos)


@router.get("/repository/{repository_id}/files", response_model=List[RepoFile])
def list_files(
    repository_id: str,
    path: str = "",
    store: MemStorage = Depends(get_storage),
    code_host: CodeHost = Depends(get_code_host),
) -> List[RepoFile]:
    repo, token = repository_with_token(store, repository_id)
    try:
        return code_host.get_repository_contents(token, repo.full_name, path, repo.default_branch)
    except CodeHostError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/repository/{repository_id}/file-content", response_model=FileContentResponse)
def file_content(
    repository_id: str,
    path: str,
    store: MemStorage = Depends(get_storage),
    code_host: CodeHost = Depends(get_code_host),
) -> FileContentResponse:
    repo, token = repository_with_token(store, repository_id)
    try:
        content = code_host.get_file_content(token, repo.full_name, path, repo.default_branch)
    except CodeHostError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return FileContentResponse(content=content)
