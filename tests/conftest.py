"""
Shared pytest fixtures for Coursebook tests.

This module provides common fixtures including:
- InMemoryRedis: async Redis double for route tests
- Course store on a temporary JSON document
- FastAPI test client wired to the doubles
"""

import os
import sys
from typing import Dict, List, Optional

import pytest
import pytest_asyncio

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from coursebook.modules.auth import BcryptVerifier
from coursebook.modules.storage import CourseStore, IdentifierAllocator


# =============================================================================
# Redis Double
# =============================================================================


class InMemoryRedis:
    """
    Minimal async stand-in for the Redis commands the service uses.

    Supports GET, SET (with NX), LPUSH, LTRIM, PING and close.
    """

    def __init__(self):
        self.values: Dict[str, str] = {}
        self.lists: Dict[str, List[str]] = {}
        self.closed = False

    async def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    async def set(self, key: str, value: str, nx: bool = False) -> Optional[bool]:
        if nx and key in self.values:
            return None
        self.values[key] = value
        return True

    async def lpush(self, key: str, *values: str) -> int:
        bucket = self.lists.setdefault(key, [])
        for value in values:
            bucket.insert(0, value)
        return len(bucket)

    async def ltrim(self, key: str, start: int, end: int) -> bool:
        bucket = self.lists.get(key, [])
        self.lists[key] = bucket[start : end + 1]
        return True

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis():
    """Fresh in-memory Redis double."""
    return InMemoryRedis()


# =============================================================================
# Module Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def verifier():
    """bcrypt verifier at the minimum cost factor to keep tests fast."""
    return BcryptVerifier(rounds=4)


@pytest.fixture
def store_path(tmp_path):
    """Location of the course document for one test."""
    return tmp_path / "data.json"


@pytest_asyncio.fixture
async def course_store(store_path):
    """Initialized, empty course store."""
    store = CourseStore(str(store_path), allocator=IdentifierAllocator(upper_bound=10000))
    await store.initialize()
    return store


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def api_client(monkeypatch, store_path, fake_redis, verifier):
    """
    TestClient for the real app with module globals pointed at test doubles.

    The lifespan is not run; fixtures stand in for what it would build.
    """
    from fastapi.testclient import TestClient

    from coursebook import main
    from coursebook.config.provider import EnvConfigProvider
    from coursebook.modules.auth import AuthFactory
    from coursebook.modules.storage import encode_document
    from coursebook.modules.users import RedisUserDirectory

    store_path.write_text(encode_document({"courses": []}), encoding="utf-8")
    directory = RedisUserDirectory(fake_redis)

    monkeypatch.setattr(main, "redis_client", fake_redis)
    monkeypatch.setattr(main, "user_directory", directory)
    monkeypatch.setattr(main, "credential_verifier", verifier)
    monkeypatch.setattr(
        main,
        "auth_service",
        AuthFactory.build(EnvConfigProvider(), directory, fake_redis, verifier=verifier),
    )
    monkeypatch.setattr(main, "course_store", CourseStore(str(store_path)))

    return TestClient(main.app)
