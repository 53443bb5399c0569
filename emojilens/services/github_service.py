"""
Code host integration for the test-case generator.

GitHubCodeHost talks to the GitHub REST API v3 with a user's OAuth token.
See: https://docs.github.com/en/rest
"""
import base64
import binascii
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple

import requests
from pydantic import ValidationError

from emojilens.core.config import settings
from emojilens.schemas.testgen import GitHubUser, PullRequestData, RepoFile

logger = logging.getLogger(__name__)


class CodeHostError(Exception):
    """Raised when the code host rejects a request or cannot be reached."""


class CodeHost(ABC):
    """Capability the API layer needs from a source code host."""

    @abstractmethod
    def authorize_url(self, state: Optional[str] = None) -> str:
        """Browser URL that starts the OAuth flow."""
        pass

    @abstractmethod
    def exchange_code_for_token(self, code: str) -> Tuple[str, GitHubUser]:
        """Trade an OAuth callback code for an access token and its user."""
        pass

    @abstractmethod
    def get_user_repositories(self, token: str) -> List[dict]:
        """List repositories visible to the token owner."""
        pass

    @abstractmethod
    def get_repository_contents(
        self, token: str, repo_full_name: str, path: str = "", branch: str = "main"
    ) -> List[RepoFile]:
        pass

    @abstractmethod
    def get_file_content(
        self, token: str, repo_full_name: str, file_path: str, branch: str = "main"
    ) -> str:
        pass

    @abstractmethod
    def create_pull_request(
        self, token: str, repo_full_name: str, pr_data: PullRequestData
    ) -> dict:
        pass


class GitHubCodeHost(CodeHost):
    """GitHub REST API client built on a shared requests session."""

    TIMEOUT = 30

    def __init__(
        self,
        api_url: Optional[str] = None,
        oauth_url: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
    ):
        self.api_url = (api_url or settings.github_api_url).rstrip("/")
        self.oauth_url = (oauth_url or settings.github_oauth_url).rstrip("/")
        self.client_id = client_id if client_id is not None else settings.github_client_id
        self.client_secret = (
            client_secret if client_secret is not None else settings.github_client_secret
        )
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": settings.user_agent,
        })

    def _request(self, method: str, url: str, token: Optional[str] = None, **kwargs) -> Any:
        """Send a request and return the decoded JSON body, raising CodeHostError on failure."""
        headers = kwargs.pop("headers", {})
        if token:
            headers["Authorization"] = f"token {token}"
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=self.TIMEOUT, **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"GitHub request failed: {method} {url}: {e}")
            raise CodeHostError(f"GitHub request failed: {e}") from e

        if not response.ok:
            logger.error(f"GitHub API error: {method} {url} -> {response.status_code}")
            raise CodeHostError(f"GitHub API error: {response.status_code} {response.text}")
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"GitHub returned a non-JSON body: {method} {url}")
            raise CodeHostError(f"GitHub returned an invalid response: {e}") from e

    def exchange_code_for_token(self, code: str) -> Tuple[str, GitHubUser]:
        if not self.client_id or not self.client_secret:
            raise CodeHostError("GitHub OAuth credentials not configured")

        token_data = self._request(
            "POST",
            f"{self.oauth_url}/access_token",
            headers={"Accept": "application/json"},
            json={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
            },
        )
        if token_data.get("error"):
            raise CodeHostError(f"GitHub OAuth error: {token_data.get('error_description')}")

        access_token = token_data.get("access_token")
        if not access_token:
            raise CodeHostError("GitHub OAuth error: no access token returned")
        user = self._request("GET", f"{self.api_url}/user", token=access_token)
        try:
            return access_token, GitHubUser(**user)
        except (TypeError, ValidationError) as e:
            raise CodeHostError(f"GitHub returned an invalid user profile: {e}") from e

    def get_user_repositories(self, token: str) -> List[dict]:
        repos = self._request(
            "GET",
            f"{self.api_url}/user/repos",
            token=token,
            params={"sort": "updated", "per_page": 100},
        )
        return [
            {
                "github_id": repo["id"],
                "name": repo["name"],
                "full_name": repo["full_name"],
                "private": repo.get("private", False),
                "default_branch": repo.get("default_branch") or "main",
            }
            for repo in repos
        ]

    def get_repository_contents(
        self, token: str, repo_full_name: str, path: str = "", branch: str = "main"
    ) -> List[RepoFile]:
        contents = self._request(
            "GET",
            f"{self.api_url}/repos/{repo_full_name}/contents/{path}",
            token=token,
            params={"ref": branch},
        )
        # A path naming a single file comes back as an object, not a list.
        items = contents if isinstance(contents, list) else [contents]
        return [
            RepoFile(
                name=item["name"],
                path=item["path"],
                type="dir" if item.get("type") == "dir" else "file",
                size=item.get("size"),
                download_url=item.get("download_url"),
            )
            for item in items
        ]

    def get_file_content(
        self, token: str, repo_full_name: str, file_path: str, branch: str = "main"
    ) -> str:
        item = self._request(
            "GET",
            f"{self.api_url}/repos/{repo_full_name}/contents/{file_path}",
            token=token,
            params={"ref": branch},
        )
        if not isinstance(item, dict) or item.get("type") != "file":
            raise CodeHostError("Path does not point to a file")
        try:
            return base64.b64decode(item.get("content") or "").decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise CodeHostError(f"File is not UTF-8 text: {file_path}") from e

    def create_pull_request(
        self, token: str, repo_full_name: str, pr_data: PullRequestData
    ) -> dict:
        repo_url = f"{self.api_url}/repos/{repo_full_name}"

        base_ref = self._request(
            "GET", f"{repo_url}/git/refs/heads/{pr_data.base_branch}", token=token
        )
        self._request(
            "POST",
            f"{repo_url}/git/refs",
            token=token,
            json={
                "ref": f"refs/heads/{pr_data.branch_name}",
                "sha": base_ref["object"]["sha"],
            },
        )
        self._request(
            "PUT",
            f"{repo_url}/contents/{pr_data.file_name}",
            token=token,
            json={
                "message": f"Add {pr_data.file_name}",
                "content": base64.b64encode(pr_data.file_content.encode("utf-8")).decode("ascii"),
                "branch": pr_data.branch_name,
            },
        )
        pr = self._request(
            "POST",
            f"{repo_url}/pulls",
            token=token,
            json={
                "title": pr_data.title,
                "body": pr_data.description,
                "head": pr_data.branch_name,
                "base": pr_data.base_branch,
            },
        )
        logger.info(f"Opened pull request {pr.get('html_url')} on {repo_full_name}")
        return pr

    def authorize_url(self, state: Optional[str] = None) -> str:
        if not self.client_id:
            raise CodeHostError("GitHub OAuth credentials not configured")
        params = {
            "client_id": self.client_id,
            "redirect_uri": settings.github_callback_url,
            "scope": settings.github_scope,
        }
        if state:
            params["state"] = state
        request = requests.Request("GET", f"{self.oauth_url}/authorize", params=params).prepare()
        return request.url
