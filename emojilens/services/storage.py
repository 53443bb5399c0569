"""
In-memory record store.

Stands in for a database: every collection is a dict keyed by a generated
UUID. Writes are serialized by one lock; reads return whatever is stored at
the time (last writer wins, no isolation).
"""
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from emojilens.schemas.emoji import AnalysisRecord
from emojilens.schemas.testgen import (
    GeneratedTestCase,
    GenerationStatus,
    Repository,
    TestCaseGeneration,
    TestCaseSummary,
)
from emojilens.schemas.user import User


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class MemStorage:
    """Process-local store for users, analyses and test generation records."""

    def __init__(self):
        self._lock = threading.Lock()
        self.users: Dict[str, User] = {}
        self.analyses: Dict[str, AnalysisRecord] = {}
        self.repositories: Dict[str, Repository] = {}
        self.generations: Dict[str, TestCaseGeneration] = {}
        self.generated_tests: Dict[str, GeneratedTestCase] = {}

    def clear(self) -> None:
        with self._lock:
            self.users.clear()
            self.analyses.clear()
            self.repositories.clear()
            self.generations.clear()
            self.generated_tests.clear()

    # ---- users ----

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in list(self.users.values()):
            if user.username == username:
                return user
        return None

    def get_user_by_github_id(self, github_id: int) -> Optional[User]:
        for user in list(self.users.values()):
            if user.github_id == github_id:
                return user
        return None

    def create_user(
        self,
        username: str,
        email: Optional[str] = None,
        avatar: Optional[str] = None,
        github_id: Optional[int] = None,
        access_token: Optional[str] = None,
    ) -> User:
        user = User(
            id=_new_id(),
            username=username,
            email=email,
            avatar=avatar,
            github_id=github_id,
            access_token=access_token,
            created_at=_now(),
        )
        with self._lock:
            self.users[user.id] = user
        return user

    def update_user(
        self,
        user_id: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
        avatar: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> Optional[User]:
        fields = {
            "username": username,
            "email": email,
            "avatar": avatar,
            "access_token": access_token,
        }
        updates = {k: v for k, v in fields.items() if v is not None}
        with self._lock:
            user = self.users.get(user_id)
            if user is None:
                return None
            updated = user.model_copy(update=updates)
            self.users[user_id] = updated
        return updated

    # ---- emoji analyses ----

    def get_analysis(self, analysis_id: str) -> Optional[AnalysisRecord]:
        return self.analyses.get(analysis_id)

    def get_analyses_by_user(self, user_id: str) -> List[AnalysisRecord]:
        # analyses keeps creation order; updates replace values in place
        records = [r for r in list(self.analyses.values()) if r.user_id == user_id]
        return records[::-1]

    def create_analysis(
        self,
        user_id: str,
        title: str,
        content: str,
        emoji_counts: Dict[str, int],
        total_emojis: int,
    ) -> AnalysisRecord:
        now = _now()
        record = AnalysisRecord(
            id=_new_id(),
            user_id=user_id,
            title=title,
            content=content,
            emoji_counts=dict(emoji_counts),
            total_emojis=total_emojis,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self.analyses[record.id] = record
        return record

    def update_analysis(
        self,
        analysis_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        emoji_counts: Optional[Dict[str, int]] = None,
        total_emojis: Optional[int] = None,
    ) -> Optional[AnalysisRecord]:
        """Replace the named fields and bump ``updated_at``; None leaves a field as is."""
        updates = {"updated_at": _now()}
        if title is not None:
            updates["title"] = title
        if content is not None:
            updates["content"] = content
        if emoji_counts is not None:
            updates["emoji_counts"] = dict(emoji_counts)
        if total_emojis is not None:
            updates["total_emojis"] = total_emojis

        with self._lock:
            record = self.analyses.get(analysis_id)
            if record is None:
                return None
            updated = record.model_copy(update=updates)
            self.analyses[analysis_id] = updated
        return updated

    def delete_analysis(self, analysis_id: str) -> bool:
        with self._lock:
            return self.analyses.pop(analysis_id, None) is not None

    # ---- repositories ----

    def upsert_repositories(self, user_id: str, repos: List[dict]) -> List[Repository]:
        """
        Store repositories listed from the code host for ``user_id``.

        A repository keeps its local id across refreshes, keyed by
        ``(user_id, github_id)``.
        """
        result: List[Repository] = []
        with self._lock:
            existing: Dict[Tuple[str, int], Repository] = {
                (r.user_id, r.github_id): r for r in self.repositories.values()
            }
            for data in repos:
                current = existing.get((user_id, data["github_id"]))
                repo = Repository(
                    id=current.id if current else _new_id(),
                    user_id=user_id,
                    **data,
                )
                self.repositories[repo.id] = repo
                result.append(repo)
        return result

    def get_repository(self, repository_id: str) -> Optional[Repository]:
        return self.repositories.get(repository_id)

    def get_repositories_by_user(self, user_id: str) -> List[Repository]:
        return [r for r in list(self.repositories.values()) if r.user_id == user_id]

    # ---- test case generations ----

    def create_generation(
        self,
        user_id: str,
        repository_id: str,
        selected_files: List[str],
        framework: str,
    ) -> TestCaseGeneration:
        generation = TestCaseGeneration(
            id=_new_id(),
            user_id=user_id,
            repository_id=repository_id,
            selected_files=list(selected_files),
            framework=framework,
            status="generating",
            created_at=_now(),
        )
        with self._lock:
            self.generations[generation.id] = generation
        return generation

    def get_generation(self, generation_id: str) -> Optional[TestCaseGeneration]:
        return self.generations.get(generation_id)

    def update_generation(
        self,
        generation_id: str,
        status: GenerationStatus,
        summaries: Optional[List[TestCaseSummary]] = None,
        error: Optional[str] = None,
    ) -> Optional[TestCaseGeneration]:
        updates = {"status": status, "error": error}
        if summaries is not None:
            updates["summaries"] = list(summaries)
        with self._lock:
            generation = self.generations.get(generation_id)
            if generation is None:
                return None
            updated = generation.model_copy(update=updates)
            self.generations[generation_id] = updated
        return updated

    # ---- generated test cases ----

    def create_generated_test(
        self,
        generation_id: str,
        summary_index: int,
        summary: TestCaseSummary,
        framework: str,
        code: str,
    ) -> GeneratedTestCase:
        test_case = GeneratedTestCase(
            id=_new_id(),
            generation_id=generation_id,
            summary_index=summary_index,
            title=summary.title,
            description=summary.description,
            test_type=summary.test_type,
            filename=summary.filename,
            framework=framework,
            code=code,
            created_at=_now(),
        )
        with self._lock:
            self.generated_tests[test_case.id] = test_case
        return test_case

    def get_generated_test(self, test_case_id: str) -> Optional[GeneratedTestCase]:
        return self.generated_tests.get(test_case_id)

    def get_generated_tests_by_generation(self, generation_id: str) -> List[GeneratedTestCase]:
        tests = [t for t in list(self.generated_tests.values()) if t.generation_id == generation_id]
        return sorted(tests, key=lambda t: t.created_at)

    def set_generated_test_pr_url(self, test_case_id: str, pr_url: str) -> Optional[GeneratedTestCase]:
        with self._lock:
            test_case = self.generated_tests.get(test_case_id)
            if test_case is None:
                return None
            updated = test_case.model_copy(update={"pr_url": pr_url})
            self.generated_tests[test_case_id] = updated
        return updated


storage = MemStorage()
