"""
Pytest configuration and shared fixtures.
"""

from typing import Dict, Set
from unittest.mock import AsyncMock

import pytest

from repositories.log_repository import LogRepository
from services.reddit_service import RedditService


class InMemoryRedis:
    """
    Minimal stand-in for the redis.asyncio commands LogRepository uses.

    Values are stored as str, as with decode_responses=True.
    """

    def __init__(self):
        self.values: Dict[str, str] = {}
        self.sets: Dict[str, Set[str]] = {}

    async def get(self, key):
        return self.values.get(key)

    async def set(self, key, value):
        self.values[key] = str(value)
        return True

    async def sadd(self, key, *members):
        members_set = self.sets.setdefault(key, set())
        before = len(members_set)
        members_set.update(members)
        return len(members_set) - before

    async def smembers(self, key):
        return set(self.sets.get(key, set()))

    async def sismember(self, key, member):
        return 1 if member in self.sets.get(key, set()) else 0

    async def sscan(self, key, cursor=0, match=None, count=None):
        return 0, sorted(self.sets.get(key, set()))

    async def incrby(self, key, amount):
        value = int(self.values.get(key, 0)) + amount
        self.values[key] = str(value)
        return value


@pytest.fixture
def fake_redis() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture
def repository(fake_redis) -> LogRepository:
    return LogRepository(fake_redis)


@pytest.fixture
def reddit_mock() -> AsyncMock:
    """RedditService double: caller is a moderator, posts succeed."""
    reddit = AsyncMock(spec=RedditService)
    reddit.is_moderator.return_value = True
    reddit.submit_post.return_value = {
        "id": "abc123",
        "name": "t3_abc123",
        "url": "https://reddit.com/r/testsub/comments/abc123",
    }
    reddit.get_hot_posts.return_value = []
    return reddit
