"""FastAPI dependency providers; tests swap these through app.dependency_overrides."""
from functools import lru_cache

from emojilens.services.ai_service import GeminiTestGenerator, TestGenerator
from emojilens.services.github_service import CodeHost, GitHubCodeHost
from emojilens.services.storage import MemStorage, storage


def get_storage() -> MemStorage:
    return storage


@lru_cache
def get_code_host() -> CodeHost:
    return GitHubCodeHost()


@lru_cache
def get_test_generator() -> TestGenerator:
    return GeminiTestGenerator()
