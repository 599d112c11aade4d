"""
Repository Pattern - Storage abstraction layer

Repositories hide storage details (Redis keys, JSON encoding) from business
logic. Consumers work with domain models and plain lists, not raw values.

Storage:
- LogRepository: Redis (group logs, dates, group set, standalone logs, counter)
"""
from config import create_redis_client

from .log_repository import LogRepository

# Shared Redis client (initialized on first use)
redis_client = None


def get_log_repository() -> LogRepository:
    """Get a LogRepository on the shared Redis client"""
    global redis_client
    if redis_client is None:
        redis_client = create_redis_client()
    return LogRepository(redis_client)


async def close_redis_client():
    """Close the shared Redis client (app shutdown)"""
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None


__all__ = [
    'LogRepository',
    'redis_client',
    'get_log_repository',
    'close_redis_client',
]
